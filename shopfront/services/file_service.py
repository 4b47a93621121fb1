# shopfront/services/file_service.py
import hashlib
from datetime import datetime
from typing import Any, Dict
import magic
from ..config import Config

class FileService:
    """Local checks on payment proof images before they are uploaded"""
    
    ALLOWED_EXTENSIONS = {
        'image/jpeg': '.jpg',
        'image/png': '.png',
        'image/webp': '.webp',
    }
    
    def __init__(self, max_file_size: int = Config.MAX_PROOF_IMAGE_SIZE):
        self.max_file_size = max_file_size

    def inspect_image(self, content: bytes) -> Dict[str, Any]:
        """Sniff the image type and size; returns a success/error dict"""
        if not content:
            return {
                'success': False,
                'error': 'The file is empty'
            }

        if len(content) > self.max_file_size:
            return {
                'success': False,
                'error': 'The image is larger than the allowed size'
            }
            
        mime_type = magic.from_buffer(content, mime=True)
        if mime_type not in self.ALLOWED_EXTENSIONS:
            return {
                'success': False,
                'error': 'Only JPEG, PNG or WebP screenshots are accepted'
            }
            
        # unique name so repeated uploads of different screenshots do not collide
        file_hash = hashlib.sha256(content).hexdigest()
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f"payment_{timestamp}_{file_hash[:8]}{self.ALLOWED_EXTENSIONS[mime_type]}"

        return {
            'success': True,
            'filename': filename,
            'mime_type': mime_type,
            'size': len(content)
        }
