# main.py
import logging
from shopfront.bot import StorefrontBot
from shopfront.config import Config, setup_logging

def main():
    # Setup logging
    setup_logging()
    logger = logging.getLogger(__name__)
    
    try:
        Config.validate()
        # Initialize and start bot
        bot = StorefrontBot()
        bot.run()
    except Exception as e:
        logger.error(f"Error starting bot: {e}", exc_info=True)
        raise

if __name__ == "__main__":
    main()
