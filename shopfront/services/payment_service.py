# shopfront/services/payment_service.py
import logging
from enum import Enum
from typing import Any, Dict, Optional
import pydantic
from ..exceptions import ApiError, SubmissionError, UploadError, ValidationError
from ..models.cart import Cart
from ..models.order import Order
from ..models.payment import PendingPayment

class PaymentState(str, Enum):
    IDLE = "idle"
    AWAITING_PROOF = "awaiting_proof"
    SUBMITTING = "submitting"
    COMPLETED = "completed"

class PaymentService:
    """Checkout hand-off: proof upload followed by one verify-and-create-order call.

    Idle -> AwaitingProof -> Submitting -> Completed. A failed submission lands
    back in AwaitingProof with last_error set, so the uploaded proof is kept. Nothing here
    retries on its own; every request maps to one user action.
    """

    def __init__(self, api, file_service, cart: Cart):
        self.api = api
        self.file_service = file_service
        self.cart = cart
        self.state = PaymentState.IDLE
        self.pending: Optional[PendingPayment] = None
        self.last_error: Optional[str] = None
        self.logger = logging.getLogger(__name__)

    @property
    def can_submit(self) -> bool:
        return (
            self.state == PaymentState.AWAITING_PROOF
            and self.pending is not None
            and bool(self.pending.proof_image_url)
        )

    def begin(self, method: Optional[str]) -> PendingPayment:
        """Start checkout for the current cart with the chosen payment method"""
        if self.cart.is_empty:
            raise ValidationError("Your cart is empty")
        if not method:
            raise ValidationError("Please select a payment method")
        if self.state == PaymentState.SUBMITTING:
            raise ValidationError("An order is already being submitted")

        self.pending = PendingPayment(
            cart_snapshot=self.cart.snapshot(),
            total=self.cart.total(),
            shop_id=self.cart.shop_id,
            method=method
        )
        self.state = PaymentState.AWAITING_PROOF
        self.last_error = None
        return self.pending

    async def upload_proof(self, content: bytes) -> str:
        """Upload a payment screenshot; a new upload replaces the previous proof"""
        if self.state != PaymentState.AWAITING_PROOF or self.pending is None:
            raise ValidationError("Start checkout before sending a payment screenshot")

        result = self.file_service.inspect_image(content)
        if not result['success']:
            self.last_error = result['error']
            raise UploadError(result['error'])

        try:
            url = await self.api.upload_image(
                content,
                filename=result['filename'],
                content_type=result['mime_type']
            )
        except ApiError as e:
            self.logger.error(f"Proof upload failed: {e}")
            self.last_error = "Failed to upload image"
            raise UploadError("Failed to upload image") from e

        self.pending.proof_image_url = url
        self.last_error = None
        self.logger.info(f"Payment proof uploaded for shop {self.pending.shop_id}")
        return url

    def _payload(self) -> Dict[str, Any]:
        pending = self.pending
        return {
            "payment_screenshot_url": pending.proof_image_url,
            "shop_id": pending.shop_id,
            "amount": float(pending.total),
            "payment_method": pending.method,
            "items": [
                {
                    "item_id": line.item_id,
                    "name": line.name,
                    "price": float(line.unit_price),
                    "quantity": line.quantity
                }
                for line in pending.cart_snapshot
            ]
        }

    async def submit(self, ledger=None) -> Order:
        """Send the verify-and-create-order request and hand the order to the ledger"""
        if not self.can_submit:
            raise ValidationError("Please upload a payment screenshot")

        self.state = PaymentState.SUBMITTING
        try:
            response = await self.api.verify_payment_and_create_order(self._payload())
        except ApiError as e:
            self.logger.error(f"Payment verification request failed: {e}")
            self._fail("Failed to verify payment")
            raise SubmissionError("Failed to verify payment") from e

        if response.get("status") != "success":
            self.logger.warning(f"Payment verification declined: {response.get('message')}")
            self._fail("Payment verification failed. Please try again.")
            raise SubmissionError("Payment verification failed. Please try again.")

        try:
            order = Order.model_validate(response.get("order") or {})
        except pydantic.ValidationError as e:
            # the order exists server-side; the next ledger refresh will show it
            self.logger.error(f"Order created but response was unusable: {e}")
            self._complete()
            raise SubmissionError("Order placed but could not be displayed; refresh your orders") from e

        if ledger is not None:
            ledger.merge_insert(order)
        self._complete()
        self.logger.info(f"Order {order.order_id} placed for shop {order.shop_id}")
        return order

    def _fail(self, message: str):
        self.last_error = message
        # the proof stays attached so the user can resubmit without re-uploading
        self.state = PaymentState.AWAITING_PROOF

    def _complete(self):
        # edits made to the cart while the proof was pending are kept
        if self.pending is not None:
            self.cart.deduct(self.pending.cart_snapshot)
        self.pending = None
        self.last_error = None
        self.state = PaymentState.COMPLETED

    def reset(self):
        """Checkout view dismissed or reopened"""
        self.pending = None
        self.last_error = None
        self.state = PaymentState.IDLE
