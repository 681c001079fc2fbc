import json

from hsn_api.server import responses
from hsn_api.server.schemas import ApiResponse, BaseSchema


class Sample(BaseSchema):
    created_at: str
    is_active: bool


def _body(response):
    return json.loads(response.body)


def test_success_envelope():
    response = responses.success({"id": 1}, "Done")

    assert response.status_code == 200
    assert _body(response) == {"success": True, "message": "Done", "data": {"id": 1}}


def test_pydantic_payload_is_camel_case():
    response = responses.success(Sample(created_at="today", is_active=True))

    assert _body(response)["data"] == {"createdAt": "today", "isActive": True}


def test_error_helpers():
    assert responses.error("Bad").status_code == 400
    assert responses.created().status_code == 201
    assert _body(responses.not_found()) == {"success": False, "message": "Resource not found", "data": None}
    server_error = responses.server_error("Failed")
    assert server_error.status_code == 500
    assert _body(server_error)["message"] == "Failed"


def test_api_response_model():
    envelope = ApiResponse[dict](success=True, message="ok", data={"a": 1})

    assert envelope.model_dump() == {"success": True, "message": "ok", "data": {"a": 1}}
