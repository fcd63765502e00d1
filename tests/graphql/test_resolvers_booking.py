"""
Tests for the payment and booking mutations
"""

import pytest

from stayhub.errors import RemoteExecutionError
from stayhub.remote import EnumLiteral

ADD_PAYMENT_METHOD = """
    mutation AddCard($month: Int!) {
      addPaymentMethod(
        cardNumber: "4000 0000 0000 0002"
        expiresOnMonth: $month
        expiresOnYear: 1999
        securityCode: "12"
        firstName: "Ada"
        lastName: "Lovelace"
        postalCode: "N1 9GU"
        country: "GB"
      ) { id token }
    }
"""

BOOK = """
    mutation {
      book(placeId: "place-1", checkIn: "2024-07-01", checkOut: "2024-07-05", numGuests: 2) {
        success
      }
    }
"""


class TestAddPaymentMethod:
    @pytest.mark.asyncio
    async def test_card_payload_is_forwarded_unmodified(self, run_query, fake_remote):
        fake_remote.responses["user"] = {"id": "u1"}
        fake_remote.responses["createPaymentAccount"] = {"id": "pa1"}
        fake_remote.responses["User"] = {"id": "u1"}

        # Invalid month and past expiry are the backend's to reject
        result = await run_query(ADD_PAYMENT_METHOD, fake_remote, token="tok", variables={"month": 13})

        assert result.errors is None
        assert result.data == {"addPaymentMethod": {"id": "u1", "token": "tok"}}

        (create_call,) = fake_remote.calls_to("createPaymentAccount")
        assert create_call.operation == "mutation"
        assert create_call.args["userId"] == "u1"
        assert create_call.args["type"] == "CREDIT_CARD"
        assert isinstance(create_call.args["type"], EnumLiteral)
        assert create_call.args["creditcard"] == {
            "cardNumber": "4000 0000 0000 0002",
            "expiresOnMonth": 13,
            "expiresOnYear": 1999,
            "securityCode": "12",
            "firstName": "Ada",
            "lastName": "Lovelace",
            "postalCode": "N1 9GU",
            "country": "GB",
        }

    @pytest.mark.asyncio
    async def test_requires_authenticated_caller(self, run_query, fake_remote):
        result = await run_query(ADD_PAYMENT_METHOD, fake_remote, variables={"month": 1})

        assert result.errors[0].message == "Not authenticated"
        assert fake_remote.calls == []


class TestBook:
    @pytest.fixture
    def bookee(self, fake_remote):
        fake_remote.responses["user"] = {"id": "u1", "paymentAccount": [{"id": "pa1"}]}
        return fake_remote

    @pytest.mark.asyncio
    async def test_success_when_booking_and_payment_created(self, run_query, bookee):
        bookee.responses["createBooking"] = {"id": "b1", "payment": {"id": "pay1"}}

        result = await run_query(BOOK, bookee, token="tok")

        assert result.errors is None
        assert result.data == {"book": {"success": True}}
        (call,) = bookee.calls_to("createBooking")
        assert call.operation == "mutation"
        assert call.args == {
            "bookeeId": "u1",
            "placeId": "place-1",
            "startDate": "2024-07-01",
            "endDate": "2024-07-05",
            "numGuests": 2,
            "payment": {"paymentMethodId": "pa1"},
        }

    @pytest.mark.asyncio
    async def test_no_success_when_payment_missing(self, run_query, bookee):
        bookee.responses["createBooking"] = {"id": "b1", "payment": None}

        result = await run_query(BOOK, bookee, token="tok")

        assert result.errors is None
        assert result.data == {"book": {"success": False}}

    @pytest.mark.asyncio
    async def test_no_success_when_backend_returns_nothing(self, run_query, bookee):
        bookee.responses["createBooking"] = None

        result = await run_query(BOOK, bookee, token="tok")

        assert result.data == {"book": {"success": False}}

    @pytest.mark.asyncio
    async def test_backend_error_propagates(self, run_query, bookee):
        bookee.responses["createBooking"] = RemoteExecutionError.from_errors(
            [{"message": "Place is not available for these dates"}]
        )

        result = await run_query(BOOK, bookee, token="tok")

        assert result.data is None
        (error,) = result.errors
        assert error.message == "Place is not available for these dates"
        assert error.extensions["remoteErrors"] == [{"message": "Place is not available for these dates"}]

    @pytest.mark.asyncio
    async def test_requires_payment_method(self, run_query, fake_remote):
        fake_remote.responses["user"] = {"id": "u1", "paymentAccount": []}

        result = await run_query(BOOK, fake_remote, token="tok")

        assert result.errors[0].message == "Add a payment method before booking"
        assert fake_remote.calls_to("createBooking") == []

    @pytest.mark.asyncio
    async def test_requires_authenticated_caller(self, run_query, fake_remote):
        result = await run_query(BOOK, fake_remote)

        assert result.errors[0].extensions["code"] == "UNAUTHENTICATED"
        assert fake_remote.calls == []
