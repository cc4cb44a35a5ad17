"""Tests for the Voyage and Reducto HTTP clients and their shared retry policy."""

from unittest.mock import MagicMock

import pytest
import requests

from zoning_search.boundary.clients import (
    ReductoExtractionClient,
    VoyageEmbeddingClient,
    is_retryable,
)
from zoning_search.core.exceptions import (
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    ValidationError,
)

EIR_URL = "https://sfgov.legistar.com/View.ashx?M=F&ID=1001&GUID=eir.pdf"


def voyage_payload(*vectors_by_index, total_tokens=12):
    return {
        "data": [{"index": index, "embedding": vector} for index, vector in vectors_by_index],
        "model": "voyage-law-2",
        "usage": {"total_tokens": total_tokens},
    }


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def voyage(session) -> VoyageEmbeddingClient:
    return VoyageEmbeddingClient(
        api_key="test-voyage-key", max_retries=3, retry_base_delay_seconds=0, session=session
    )


@pytest.fixture
def reducto(session) -> ReductoExtractionClient:
    return ReductoExtractionClient(
        api_key="test-reducto-key", max_retries=2, retry_base_delay_seconds=0, session=session
    )


# ============================================================================
# Voyage embeddings
# ============================================================================


class TestVoyageEmbeddingClient:
    """Test embedding requests, ordering and retries."""

    def test_places_vectors_by_index(self, voyage, session, fake_response) -> None:
        """Should align vectors with inputs using the index field, not response order."""
        session.request.return_value = fake_response(
            payload=voyage_payload((1, [0.3, 0.4]), (0, [0.1, 0.2]))
        )

        response = voyage.embed(["first", "second"])

        assert response.vectors == [[0.1, 0.2], [0.3, 0.4]]
        assert response.total_tokens == 12
        assert response.model == "voyage-law-2"

    def test_request_shape(self, voyage, session, fake_response) -> None:
        """Should post input, model and input type with a bearer token."""
        session.request.return_value = fake_response(payload=voyage_payload((0, [0.1])))

        voyage.embed(["Rear yard setback"], input_type="document")

        args, kwargs = session.request.call_args
        assert args == ("POST", "https://api.voyageai.com/v1/embeddings")
        assert kwargs["json"] == {
            "input": ["Rear yard setback"],
            "model": "voyage-law-2",
            "input_type": "document",
        }
        assert kwargs["headers"]["Authorization"] == "Bearer test-voyage-key"
        assert kwargs["timeout"] == 60.0

    def test_missing_index_leaves_gap(self, voyage, session, fake_response) -> None:
        session.request.return_value = fake_response(payload=voyage_payload((0, [0.5])))

        response = voyage.embed(["a", "b"])

        assert response.vectors == [[0.5], None]

    def test_discards_wrong_dimensionality(self, session, fake_response) -> None:
        """Should drop vectors whose length does not match the configured dimensions."""
        client = VoyageEmbeddingClient(api_key="test-voyage-key", dimensions=3, session=session)
        session.request.return_value = fake_response(
            payload=voyage_payload((0, [0.1, 0.2, 0.3]), (1, [0.1, 0.2]))
        )

        response = client.embed(["a", "b"])

        assert response.vectors == [[0.1, 0.2, 0.3], None]

    def test_empty_input_sends_nothing(self, voyage, session) -> None:
        assert voyage.embed([]).vectors == []
        session.request.assert_not_called()

    def test_rejects_oversized_request(self, voyage, session) -> None:
        """Should refuse more than 128 texts before any network call."""
        with pytest.raises(ValidationError):
            voyage.embed(["text"] * 129)
        session.request.assert_not_called()

    def test_requires_api_key(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            VoyageEmbeddingClient(api_key="")
        assert exc_info.value.details["setting"] == "VOYAGE_API_KEY"

    def test_retries_rate_limit(self, voyage, session, fake_response) -> None:
        """Should retry a 429 and return the later success."""
        session.request.side_effect = [
            fake_response(status_code=429, text="rate limited"),
            fake_response(payload=voyage_payload((0, [0.9]))),
        ]

        response = voyage.embed(["Shadow on Victoria Manalo Draves Park"])

        assert response.vectors == [[0.9]]
        assert session.request.call_count == 2

    def test_retries_timeouts(self, voyage, session, fake_response) -> None:
        session.request.side_effect = [
            requests.Timeout("read timed out"),
            fake_response(payload=voyage_payload((0, [0.2]))),
        ]

        assert voyage.embed(["Wind comfort criteria"]).vectors == [[0.2]]

    def test_client_error_is_not_retried(self, voyage, session, fake_response) -> None:
        """Should fail immediately on a 4xx other than 429."""
        session.request.return_value = fake_response(status_code=400, text="bad input")

        with pytest.raises(EmbeddingError) as exc_info:
            voyage.embed(["text"])

        assert exc_info.value.status_code == 400
        assert exc_info.value.retryable is False
        assert session.request.call_count == 1

    @pytest.mark.parametrize(
        "payload",
        [
            voyage_payload((0, ["not-a-number", 0.2])),
            voyage_payload((0, [None, 0.2])),
            {"data": [{"index": 0, "embedding": [0.1, 0.2]}], "usage": "12 tokens"},
            {"data": [{"index": 0, "embedding": [0.1, 0.2]}], "usage": {"total_tokens": "many"}},
        ],
    )
    def test_malformed_payload_raises_embedding_error(
        self, voyage, session, fake_response, payload
    ) -> None:
        """Should report undecodable provider payloads as embedding failures."""
        session.request.return_value = fake_response(payload=payload)

        with pytest.raises(EmbeddingError, match="malformed"):
            voyage.embed(["text"])

        assert session.request.call_count == 1

    def test_server_errors_exhaust_retries(self, voyage, session, fake_response) -> None:
        """Should give up after max_retries attempts and raise the last error."""
        session.request.return_value = fake_response(status_code=503, text="unavailable")

        with pytest.raises(EmbeddingError) as exc_info:
            voyage.embed(["text"])

        assert exc_info.value.status_code == 503
        assert session.request.call_count == 3

    def test_embed_query_expands_vocabulary(self, voyage, session, fake_response) -> None:
        """Should expand zoning abbreviations and embed as a query."""
        session.request.return_value = fake_response(payload=voyage_payload((0, [0.7, 0.1])))

        vector = voyage.embed_query("EIR for SoMa")

        sent = session.request.call_args.kwargs["json"]
        assert sent["input_type"] == "query"
        assert sent["input"] == ["Environmental Impact Report EIR for South of Market SOMA"]
        assert vector == [0.7, 0.1]

    def test_embed_query_without_vector(self, voyage, session, fake_response) -> None:
        session.request.return_value = fake_response(payload={"data": [], "usage": {}})

        with pytest.raises(EmbeddingError):
            voyage.embed_query("height limits")


# ============================================================================
# Reducto extraction
# ============================================================================


class TestReductoExtractionClient:
    """Test parse requests and error mapping."""

    def test_parse_returns_payload(self, reducto, session, fake_response) -> None:
        payload = {"result": {"chunks": [{"content": "Project description"}]}}
        session.request.return_value = fake_response(payload=payload)

        assert reducto.parse(EIR_URL) == payload

        args, kwargs = session.request.call_args
        assert args == ("POST", "https://platform.reducto.ai/parse")
        assert kwargs["json"] == {"document_url": EIR_URL}
        assert kwargs["headers"]["Authorization"] == "Bearer test-reducto-key"

    def test_payload_error(self, reducto, session, fake_response) -> None:
        """Should raise when the service reports an error in a 200 body."""
        session.request.return_value = fake_response(payload={"error": "document too large"})

        with pytest.raises(ExtractionError, match="document too large"):
            reducto.parse(EIR_URL)

    def test_non_json_body(self, reducto, session, fake_response) -> None:
        response = fake_response()
        response.json.side_effect = ValueError("Expecting value")
        session.request.return_value = response

        with pytest.raises(ExtractionError):
            reducto.parse(EIR_URL)

        assert session.request.call_count == 1

    def test_connection_errors_exhaust_retries(self, reducto, session) -> None:
        session.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(ExtractionError) as exc_info:
            reducto.parse(EIR_URL)

        assert exc_info.value.retryable is True
        assert session.request.call_count == 2

    def test_requires_api_key(self) -> None:
        with pytest.raises(ConfigurationError):
            ReductoExtractionClient(api_key="   ")


class TestRetryPredicate:
    def test_only_flagged_upstream_errors_retry(self) -> None:
        assert is_retryable(EmbeddingError("x", retryable=True))
        assert not is_retryable(EmbeddingError("x"))
        assert not is_retryable(ValueError("x"))
