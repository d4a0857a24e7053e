"""Tests for core.services.normalizer (list normalization, parse errors, Ack)."""

import pytest

from conftest import orders_page, read_fixture, seller_list_page
from core.domain.calls import GET_ORDERS, GET_SELLER_LIST, GET_USER
from core.domain.errors import EbayApiError, ResponseParseError
from core.services.normalizer import get_path, parse_response, raise_for_ack


def test_single_item_is_still_a_list():
    document = parse_response(seller_list_page(["110"]), GET_SELLER_LIST.repeatable_paths())

    items = document["GetSellerListResponse"]["ItemArray"]["Item"]
    assert isinstance(items, list)
    assert items[0]["ItemID"] == "110"


def test_many_items_keep_document_order():
    document = parse_response(seller_list_page(["1", "2", "3"]), GET_SELLER_LIST.repeatable_paths())

    items = document["GetSellerListResponse"]["ItemArray"]["Item"]
    assert [item["ItemID"] for item in items] == ["1", "2", "3"]


def test_nested_transactions_are_lists():
    document = parse_response(orders_page(["A"]), GET_ORDERS.repeatable_paths())

    order = document["GetOrdersResponse"]["OrderArray"]["Order"][0]
    assert isinstance(order["TransactionArray"]["Transaction"], list)


def test_non_repeatable_fields_stay_scalar():
    document = parse_response(read_fixture("getUserSample.xml"), GET_USER.repeatable_paths())

    user = document["GetUserResponse"]["User"]
    assert isinstance(user, dict)
    assert user["UserID"] == "testebay00"
    assert isinstance(user["SellerInfo"], dict)


def test_list_rule_is_path_scoped():
    xml = "<R><A><Item>1</Item></A><B><Item>2</Item></B></R>"
    document = parse_response(xml, {("R", "A", "Item")})

    assert document["R"]["A"]["Item"] == ["1"]
    assert document["R"]["B"]["Item"] == "2"


def test_attributes_are_kept():
    document = parse_response(seller_list_page(["1"]), GET_SELLER_LIST.repeatable_paths())

    price = document["GetSellerListResponse"]["ItemArray"]["Item"][0]["SellingStatus"]["CurrentPrice"]
    assert price == {"@currencyID": "USD", "#text": "9.99"}


def test_bytes_input_is_accepted():
    document = parse_response(read_fixture("completeSaleSample.xml").encode("utf-8"))
    assert document["CompleteSaleResponse"]["Ack"] == "Success"


@pytest.mark.parametrize("text", ["", "   ", "<GetUserResponse><Ack>", "not xml at all"])
def test_malformed_xml_raises(text):
    with pytest.raises(ResponseParseError):
        parse_response(text)


def test_get_path_returns_none_for_missing_segments():
    document = {"A": {"B": {"C": 1}}}
    assert get_path(document, ("A", "B", "C")) == 1
    assert get_path(document, ("A", "X", "C")) is None
    assert get_path(document, ("A", "B", "C", "D")) is None


def test_failure_ack_raises_api_error():
    document = parse_response(read_fixture("failureSample.xml"), GET_ORDERS.repeatable_paths())

    with pytest.raises(EbayApiError) as excinfo:
        raise_for_ack(document, "GetOrders")

    assert excinfo.value.errors[0]["ErrorCode"] == "931"
    assert "Auth token is invalid" in str(excinfo.value)


def test_warning_ack_passes_through():
    document = {"GetOrdersResponse": {"Ack": "Warning", "Errors": [{"SeverityCode": "Warning"}]}}
    raise_for_ack(document, "GetOrders")
