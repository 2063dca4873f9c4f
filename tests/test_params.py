"""Tests for parameter nodes and tree folding."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel
from reqtree.errors import BuildError, InvalidTargetError, MissingTargetError, MultipleTargetsError
from reqtree.models import CachePolicyType, HttpMethod, RequestDescriptor, RequestDraft, SessionConfig
from reqtree.params import (
    Body,
    CachePolicy,
    CombinedParams,
    Header,
    MediaType,
    Method,
    Query,
    SessionHeader,
    SessionOption,
    SessionParam,
    Timeout,
    TimeoutScope,
    Url,
    fold,
)

TODOS = "https://api.example.com/todos"


class Todo(BaseModel):
    id: int
    title: str


class TestFold:
    """Tests for folding a tree into a descriptor."""

    def test_minimal_tree(self):
        """Test the canonical target + method example."""
        descriptor, _ = fold(CombinedParams(Url(TODOS), Method(HttpMethod.GET)))

        assert descriptor == RequestDescriptor(method=HttpMethod.GET, url=TODOS, headers=(), body=b"")

    def test_missing_target_fails(self):
        """Test that a tree without Url cannot be folded."""
        with pytest.raises(MissingTargetError):
            fold(CombinedParams(Method("POST"), Header("Accept", "text/plain")))

    def test_empty_tree_fails(self):
        """Test that an empty tree has no target."""
        with pytest.raises(BuildError):
            fold(CombinedParams())

    def test_multiple_targets_fail(self):
        """Test that two Url nodes are rejected."""
        with pytest.raises(MultipleTargetsError) as exc_info:
            fold(CombinedParams(Url(TODOS), CombinedParams(Url("https://other.example.com"))))
        assert exc_info.value.targets == [TODOS, "https://other.example.com"]

    @pytest.mark.parametrize("target", ["/todos", "api.example.com/todos", "ftp://example.com/file"])
    def test_non_absolute_target_fails(self, target):
        """Test that relative or non-http targets are rejected."""
        with pytest.raises(InvalidTargetError):
            fold(Url(target))

    def test_default_method_is_get(self):
        """Test that GET is used when no Method node is present."""
        descriptor, _ = fold(Url(TODOS))
        assert descriptor.method == HttpMethod.GET

    def test_last_method_wins(self):
        """Test that a later Method node overrides an earlier one."""
        descriptor, _ = fold(CombinedParams(Method("GET"), Url(TODOS), Method("delete")))
        assert descriptor.method == HttpMethod.DELETE

    def test_header_order_preserved(self):
        """Test that headers keep declaration order."""
        descriptor, _ = fold(
            CombinedParams(
                Url(TODOS),
                Header("X-First", "1"),
                Header("X-Second", "2"),
                Header("X-Third", "3"),
            )
        )
        assert descriptor.headers == (("X-First", "1"), ("X-Second", "2"), ("X-Third", "3"))

    def test_depth_first_left_to_right(self):
        """Test traversal order through nested composites."""
        descriptor, _ = fold(
            CombinedParams(
                Url(TODOS),
                Header("A", "1"),
                CombinedParams(Header("B", "2"), CombinedParams(Header("A", "3"))),
                Header("C", "4"),
            )
        )

        assert descriptor.headers == (("A", "1"), ("B", "2"), ("A", "3"), ("C", "4"))
        assert descriptor.get_all("a") == ["1", "3"]
        assert descriptor.header("A") == "3"
        assert descriptor.effective_headers() == {"A": "3", "B": "2", "C": "4"}

    def test_none_and_list_children(self):
        """Test that None children are dropped and lists are nested."""
        tree = CombinedParams(Url(TODOS), None, [Query("tag", "a"), Query("tag", "b")])

        assert len(tree) == 2
        descriptor, _ = fold(tree)
        assert descriptor.url == f"{TODOS}?tag=a&tag=b"

    def test_fold_is_repeatable(self):
        """Test that folding the same tree twice gives equal descriptors."""
        tree = CombinedParams(Url(TODOS), Header("Accept", "application/json"), Body({"a": 1}))
        assert fold(tree)[0] == fold(tree)[0]


class TestMethod:
    """Tests for Method."""

    def test_string_verb_normalized(self):
        """Test that lowercase strings become HttpMethod members."""
        assert Method("post").verb == HttpMethod.POST

    def test_unknown_verb_rejected(self):
        """Test that an unknown verb fails at construction."""
        with pytest.raises(ValueError):
            Method("FETCH")


class TestQuery:
    """Tests for Query."""

    def test_appended_to_existing_query(self):
        """Test that items follow any query already in the Url."""
        descriptor, _ = fold(CombinedParams(Url(f"{TODOS}?a=1"), Query("b", 2), Query("done", True)))
        assert descriptor.url == f"{TODOS}?a=1&b=2&done=true"

    def test_values_are_encoded(self):
        """Test that names and values are URL encoded."""
        descriptor, _ = fold(CombinedParams(Url(TODOS), Query("q", "hello world&more")))
        assert descriptor.url == f"{TODOS}?q=hello+world%26more"

    def test_items_keep_mapping_order(self):
        """Test Query.items with a mapping."""
        descriptor, _ = fold(CombinedParams(Url(TODOS), Query.items({"sort": "asc", "limit": 50})))
        assert descriptor.url == f"{TODOS}?sort=asc&limit=50"


class TestBody:
    """Tests for Body encoding."""

    def test_bytes_sent_as_is(self):
        """Test raw bytes with no implied content type."""
        descriptor, _ = fold(CombinedParams(Url(TODOS), Body(b"\x00\x01")))
        assert descriptor.body == b"\x00\x01"
        assert descriptor.header("Content-Type") is None

    def test_string_encoded_utf8(self):
        """Test that text bodies are UTF-8 encoded."""
        descriptor, _ = fold(CombinedParams(Url(TODOS), Body("héllo", content_type="text/plain")))
        assert descriptor.body == "héllo".encode()
        assert descriptor.header("content-type") == "text/plain"

    def test_mapping_encoded_as_json(self):
        """Test JSON encoding of plain data."""
        descriptor, _ = fold(CombinedParams(Url(TODOS), Method("POST"), Body({"title": "x", "done": False})))
        assert descriptor.body == b'{"title": "x", "done": false}'
        assert descriptor.header("Content-Type") == "application/json"

    def test_pydantic_model_encoded(self):
        """Test JSON encoding of pydantic models."""
        descriptor, _ = fold(CombinedParams(Url(TODOS), Body(Todo(id=1, title="x"))))
        assert descriptor.body == b'{"id":1,"title":"x"}'

    def test_unencodable_body_fails(self):
        """Test that non-JSON values raise BuildError at fold time."""
        with pytest.raises(BuildError):
            fold(CombinedParams(Url(TODOS), Body(object())))


class TestHeader:
    """Tests for Header values and shortcuts."""

    def test_callable_value_evaluated_per_fold(self):
        """Test that a callable value is read on every fold."""
        state = {"token": "first"}
        tree = CombinedParams(Url(TODOS), Header("X-Token", lambda: state["token"]))

        assert fold(tree)[0].header("X-Token") == "first"
        state["token"] = "second"
        assert fold(tree)[0].header("X-Token") == "second"

    def test_media_type_shortcuts(self):
        """Test Accept and Content-Type with MediaType."""
        descriptor, _ = fold(
            CombinedParams(Url(TODOS), Header.accept(MediaType.JSON), Header.content_type("text/csv"))
        )
        assert descriptor.headers == (("Accept", "application/json"), ("Content-Type", "text/csv"))

    def test_host_with_port(self):
        """Test the Host shortcut."""
        assert Header.host("example.com", 8080).resolve() == "example.com:8080"
        assert Header.host("example.com").resolve() == "example.com"

    def test_failing_callable_value_is_build_error(self):
        """Test that a callable raising during the fold becomes a BuildError."""
        tree = CombinedParams(Url(TODOS), Header("X-Token", lambda: {}["token"]))

        with pytest.raises(BuildError, match="X-Token") as exc_info:
            fold(tree)
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_failing_custom_node_is_build_error(self):
        """Test that any node exception is wrapped with the node's class name."""

        class Exploding:
            def build_param(self, draft):
                raise RuntimeError("boom")

        with pytest.raises(BuildError, match="Exploding failed to build: boom"):
            fold(CombinedParams(Url(TODOS), Exploding()))


class TestSessionParams:
    """Tests for session-affecting nodes."""

    def test_session_nodes_do_not_touch_request(self):
        """Test that session options only write to the session config."""
        descriptor, config = fold(
            CombinedParams(
                Url(TODOS),
                Timeout(5),
                Timeout(60, TimeoutScope.RESOURCE),
                CachePolicy(CachePolicyType.RELOAD),
                SessionHeader("User-Agent", "tests"),
                SessionOption("follow_redirects", False),
            )
        )

        assert descriptor.headers == ()
        assert config.timeout == 5
        assert config.resource_timeout == 60
        assert config.cache_policy == CachePolicyType.RELOAD
        assert config.headers == [("User-Agent", "tests")]
        assert config.follow_redirects is False

    def test_unknown_option_fails(self):
        """Test that unknown session keys are build errors."""
        with pytest.raises(BuildError):
            fold(CombinedParams(Url(TODOS), SessionOption("retries", 3)))

    def test_invalid_value_fails(self):
        """Test that invalid session values are build errors."""
        with pytest.raises(BuildError):
            fold(CombinedParams(Url(TODOS), Timeout(-1)))

    def test_capability_decides_participation(self):
        """Test that any node with build_configuration joins the session fold."""

        @dataclass(frozen=True)
        class Proxy:
            url: str

            def build_param(self, draft: RequestDraft) -> None:
                pass

            def build_configuration(self, config: SessionConfig) -> None:
                config.proxy = self.url

        assert isinstance(Proxy("http://proxy:3128"), SessionParam)
        assert not isinstance(Url(TODOS), SessionParam)

        _, config = fold(CombinedParams(Url(TODOS), Proxy("http://proxy:3128")))
        assert config.proxy == "http://proxy:3128"
