from decimal import Decimal

import pytest

from shopfront.exceptions import ApiError, SubmissionError, UploadError, ValidationError
from shopfront.services.order_service import OrderService
from shopfront.services.payment_service import PaymentService, PaymentState
from conftest import order_payload


@pytest.fixture
def payment(api, file_service, cart, tea):
    for _ in range(3):
        cart.add_item(tea)
    return PaymentService(api, file_service, cart)


class TestBegin:
    def test_empty_cart_is_rejected(self, api, file_service, cart):
        service = PaymentService(api, file_service, cart)

        with pytest.raises(ValidationError):
            service.begin("jazzcash")
        assert service.state == PaymentState.IDLE

    def test_method_is_required(self, payment):
        with pytest.raises(ValidationError):
            payment.begin(None)
        assert payment.state == PaymentState.IDLE

    def test_begin_snapshots_cart(self, payment, cart):
        pending = payment.begin("jazzcash")
        cart.update_quantity("A", 10)

        assert payment.state == PaymentState.AWAITING_PROOF
        assert pending.total == Decimal("7.50")
        assert pending.cart_snapshot[0].quantity == 3
        assert pending.shop_id == "S1"

    async def test_submit_without_proof_sends_nothing(self, payment, api):
        payment.begin("jazzcash")

        assert not payment.can_submit
        with pytest.raises(ValidationError):
            await payment.submit()
        assert api.count("verify_payment_and_create_order") == 0


class TestHappyPath:
    async def test_upload_then_submit_places_order(self, payment, api, cart):
        api.upload_results.append("https://x/img.png")
        api.submit_results.append({"status": "success", "order": order_payload("O1")})
        ledger = OrderService(api)

        payment.begin("jazzcash")
        url = await payment.upload_proof(b"png-bytes")
        assert url == "https://x/img.png"
        assert payment.can_submit

        order = await payment.submit(ledger)

        assert order.order_id == "O1"
        assert payment.state == PaymentState.COMPLETED
        assert payment.pending is None
        assert cart.is_empty
        assert ledger.orders[0].order_id == "O1"

        name, (payload,) = api.calls[-1]
        assert name == "verify_payment_and_create_order"
        assert payload == {
            "payment_screenshot_url": "https://x/img.png",
            "shop_id": "S1",
            "amount": 7.5,
            "payment_method": "jazzcash",
            "items": [{"item_id": "A", "name": "Tea", "price": 2.5, "quantity": 3}],
        }


class TestUploadFailures:
    async def test_upload_proof_requires_checkout(self, payment, api):
        with pytest.raises(ValidationError):
            await payment.upload_proof(b"png-bytes")
        assert api.count("upload_image") == 0

    async def test_invalid_file_is_not_uploaded(self, payment, api):
        payment.begin("jazzcash")

        with pytest.raises(UploadError):
            await payment.upload_proof(b"")
        assert api.count("upload_image") == 0
        assert payment.last_error == "The file is empty"

    async def test_failed_upload_can_be_retried(self, payment, api):
        api.upload_results.extend([ApiError("boom", status=500), "https://x/second.png"])
        payment.begin("jazzcash")

        with pytest.raises(UploadError, match="Failed to upload image"):
            await payment.upload_proof(b"png-bytes")
        assert payment.state == PaymentState.AWAITING_PROOF
        assert not payment.can_submit

        await payment.upload_proof(b"png-bytes")

        assert payment.pending.proof_image_url == "https://x/second.png"
        assert payment.last_error is None
        assert payment.can_submit


class TestSubmissionFailures:
    async def test_declined_submission_keeps_proof(self, payment, api, cart):
        api.upload_results.append("https://x/img.png")
        api.submit_results.extend([
            {"status": "failed", "message": "screenshot unreadable"},
            {"status": "success", "order": order_payload("O2")},
        ])
        payment.begin("easypaisa")
        await payment.upload_proof(b"png-bytes")

        with pytest.raises(SubmissionError):
            await payment.submit()

        assert payment.state == PaymentState.AWAITING_PROOF
        assert payment.pending.proof_image_url == "https://x/img.png"
        assert payment.last_error
        assert not cart.is_empty

        order = await payment.submit()
        assert order.order_id == "O2"
        assert api.count("upload_image") == 1

    async def test_transport_failure_is_submission_error(self, payment, api):
        api.upload_results.append("https://x/img.png")
        api.submit_results.append(ApiError("down", status=503))
        payment.begin("jazzcash")
        await payment.upload_proof(b"png-bytes")

        with pytest.raises(SubmissionError, match="Failed to verify payment"):
            await payment.submit()
        assert payment.can_submit

    async def test_reset_discards_pending(self, payment):
        payment.begin("jazzcash")
        payment.reset()

        assert payment.state == PaymentState.IDLE
        assert payment.pending is None


class TestCartDuringCheckout:
    async def test_items_added_after_begin_survive_order(self, payment, api, cart, samosa):
        api.upload_results.append("https://x/img.png")
        api.submit_results.append({"status": "success", "order": order_payload("O1")})
        payment.begin("jazzcash")
        cart.add_item(samosa)
        await payment.upload_proof(b"png-bytes")

        await payment.submit()

        assert [(line.item_id, line.quantity) for line in cart.lines] == [("B", 1)]
        name, (payload,) = api.calls[-1]
        assert [item["item_id"] for item in payload["items"]] == ["A"]
