"""
Tests for record listing and log lookup flows.
"""

import json

import pytest

from conftest import ServerResponse, record_json, run_object
from kubectl_tekton.errors import ConfigurationError, DecodingError
from kubectl_tekton.modules.action import (
    LOG_ANNOTATION,
    ListOptions,
    build_filter,
    fetch_log,
    iter_records,
    list_records,
    list_request,
    log_name_for,
    nested_mapping,
    parse_pairs,
)
from kubectl_tekton.modules.models import Record, TypedPayload
from kubectl_tekton.modules.resolver import GroupVersionKind

PIPELINE_RUN = GroupVersionKind("tekton.dev", "v1beta1", "PipelineRun")
RECORDS_PATH = "/demo/results/-/records"


# =============================================================================
# Filter construction
# =============================================================================

class TestFilter:
    """build_filter() and parse_pairs()"""

    def test_kind_only(self):
        """Test that the record type is always constrained."""
        options = ListOptions(gvk=PIPELINE_RUN, namespace="demo")
        assert build_filter(options) == 'data_type == "tekton.dev/v1beta1.PipelineRun"'

    def test_all_clauses(self):
        """Test clause order and syntax."""
        options = ListOptions(
            gvk=PIPELINE_RUN,
            namespace="demo",
            name="build",
            uid="u1",
            labels="app=web",
            annotations="team=ci",
            filter="data.status.completionTime != null",
        )
        assert build_filter(options) == (
            'data_type == "tekton.dev/v1beta1.PipelineRun"'
            ' && data.metadata.name == "build"'
            ' && data.metadata.uid == "u1"'
            ' && data.metadata.labels["app"] == "web"'
            ' && data.metadata.annotations["team"] == "ci"'
            " && (data.status.completionTime != null)"
        )

    def test_literals_escaped(self):
        """Test that quotes in values cannot break out of the literal."""
        options = ListOptions(gvk=PIPELINE_RUN, namespace="demo", name='a" || true || "')
        assert 'data.metadata.name == "a\\" || true || \\""' in build_filter(options)

    def test_finalizers_and_owner_references(self):
        """Test membership clauses over finalizers and owner references."""
        options = ListOptions(
            gvk=PIPELINE_RUN,
            namespace="demo",
            finalizers="chains.tekton.dev, results.tekton.dev/pipelinerun",
            owner_references="release,Repository/app",
        )
        assert build_filter(options) == (
            'data_type == "tekton.dev/v1beta1.PipelineRun"'
            ' && "chains.tekton.dev" in data.metadata.finalizers'
            ' && "results.tekton.dev/pipelinerun" in data.metadata.finalizers'
            ' && data.metadata.ownerReferences.exists(o, o.name == "release")'
            ' && data.metadata.ownerReferences.exists(o, o.kind == "Repository" && o.name == "app")'
        )

    @pytest.mark.parametrize("reference", ["/app", "Repository/"])
    def test_owner_reference_invalid(self, reference):
        """Test that a kind/name reference needs both parts."""
        options = ListOptions(gvk=PIPELINE_RUN, namespace="demo", owner_references=reference)
        with pytest.raises(ConfigurationError, match="invalid owner reference"):
            build_filter(options)

    def test_parse_pairs(self):
        """Test selector parsing."""
        assert parse_pairs("a=1, b = 2,,c=") == {"a": "1", "b": "2", "c": ""}
        assert parse_pairs("") == {}

    @pytest.mark.parametrize("value", ["novalue", "=x", "a=1,broken"])
    def test_parse_pairs_invalid(self, value):
        """Test that malformed selectors are rejected."""
        with pytest.raises(ConfigurationError, match="invalid labels selector"):
            parse_pairs(value)

    def test_namespace_required(self):
        """Test that the wildcard parent needs a namespace."""
        with pytest.raises(ConfigurationError, match="namespace must be specified"):
            list_request(ListOptions(gvk=PIPELINE_RUN, namespace=""))

    def test_list_request(self):
        """Test the request built for a listing."""
        request = list_request(ListOptions(gvk=PIPELINE_RUN, namespace="demo", limit=50))
        assert request.parent == "demo/results/-"
        assert request.page_size == 50
        assert request.page_token == ""


# =============================================================================
# Listing
# =============================================================================

class TestListing:
    """list_records() and iter_records()"""

    def test_single_page_with_token(self, results_server, client):
        """Test that list_records passes the caller's token through."""
        results_server.register(
            "GET", RECORDS_PATH,
            ServerResponse(json_body={"records": [record_json("demo/results/r1/records/a", run_object("a"))]}),
            params={"pageToken": "t1"},
        )

        page = list_records(client, ListOptions(gvk=PIPELINE_RUN, namespace="demo"), page_token="t1")

        assert len(page.records) == 1
        assert results_server.calls[0].params["filter"] == 'data_type == "tekton.dev/v1beta1.PipelineRun"'

    def test_iter_all_pages(self, results_server, client):
        """Test that iter_records walks every page."""
        results_server.register(
            "GET", RECORDS_PATH,
            ServerResponse(json_body={"records": [{"name": "b"}]}),
            params={"pageToken": "next"},
        )
        results_server.register(
            "GET", RECORDS_PATH,
            ServerResponse(json_body={"records": [{"name": "a"}], "nextPageToken": "next"}),
        )

        names = [r.name for r in iter_records(client, ListOptions(gvk=PIPELINE_RUN, namespace="demo"))]

        assert names == ["a", "b"]


# =============================================================================
# Logs
# =============================================================================

def _record(annotations):
    body = record_json("demo/results/r1/records/a", run_object("build", annotations=annotations))
    return Record.from_json(json.dumps(body).encode())


class TestLogs:
    """log_name_for() and fetch_log()"""

    def test_log_name_present(self):
        """Test reading the log annotation."""
        record = _record({LOG_ANNOTATION: "demo/results/r1/logs/l1"})
        assert log_name_for(record) == "demo/results/r1/logs/l1"

    @pytest.mark.parametrize("annotations", [{}, {LOG_ANNOTATION: ""}, {"other": "x"}])
    def test_log_name_missing(self, annotations):
        """Test that a missing or empty annotation yields None."""
        assert log_name_for(_record(annotations)) is None

    def test_log_name_bad_payload(self):
        """Test that an unreadable payload is a decoding error."""
        record = Record(name="r", data=TypedPayload(type="t", value=b"garbage"))
        with pytest.raises(DecodingError):
            log_name_for(record)

    @pytest.mark.parametrize(
        "obj,field",
        [
            ({"metadata": "oops"}, "metadata"),
            ({"metadata": {"annotations": ["a", "b"]}}, "metadata.annotations"),
        ],
    )
    def test_log_name_unexpected_shape(self, obj, field):
        """Test that a JSON object not shaped like a Kubernetes object is a decoding error."""
        record = Record.from_json(json.dumps(record_json("demo/results/r1/records/a", obj)).encode())
        with pytest.raises(DecodingError, match=f"field {field} is not an object"):
            log_name_for(record)

    def test_log_name_not_a_string(self):
        """Test that a non-string log annotation is a decoding error."""
        record = _record({LOG_ANNOTATION: 42})
        with pytest.raises(DecodingError, match="is not a string"):
            log_name_for(record)

    def test_nested_mapping(self):
        """Test walking a stored object."""
        obj = {"metadata": {"labels": {"app": "web"}, "annotations": None}}
        assert nested_mapping(obj, "metadata", "labels") == {"app": "web"}
        assert nested_mapping(obj, "metadata", "annotations") == {}
        assert nested_mapping(obj, "status") == {}

    def test_record_to_log_bytes(self, results_server, client):
        """Test finding a run's log through its record and fetching it verbatim."""
        raw = b"[prepare] ok\n[build] \xe2\x9c\x93 \xff\n"
        obj = run_object("build", annotations={LOG_ANNOTATION: "demo/results/r1/logs/l1"})
        results_server.register(
            "GET", RECORDS_PATH,
            ServerResponse(json_body={"records": [record_json("demo/results/r1/records/a", obj)]}),
        )
        results_server.register("GET", "/demo/results/r1/logs/l1", ServerResponse(content=raw))

        page = list_records(client, ListOptions(gvk=PIPELINE_RUN, namespace="demo", name="build"))
        data = fetch_log(client, log_name_for(page.records[0]))

        assert data == raw
        assert [c.raw_path.rsplit("/", 1)[-1] for c in results_server.calls] == ["records", "l1"]
