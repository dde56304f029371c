import pytest

from motescript.Messages import (
    LinkFaultKind,
    MalformedMessageError,
    classify_link_fault,
    parse_received,
    started_endpoint,
)


@pytest.mark.parametrize("msg, kind", [
    ("done", LinkFaultKind.DONE),
    ("[INFO: App] done", LinkFaultKind.DONE),
    ("1 third", LinkFaultKind.DETERIORATE),
    ("2 thirds", LinkFaultKind.IMPROVE),
    ("3 started", LinkFaultKind.STARTED),
    ("received 4", LinkFaultKind.OTHER),
    ("Done", LinkFaultKind.OTHER),
])
def test_classify_link_fault(msg, kind):
    assert classify_link_fault(msg) is kind


def test_classify_link_fault_priority():
    # done wins over every other keyword, "1 third" over "2 thirds"
    assert classify_link_fault("1 third done") is LinkFaultKind.DONE
    assert classify_link_fault("1 third and 2 thirds") is LinkFaultKind.DETERIORATE
    assert classify_link_fault("2 thirds, 1 started") is LinkFaultKind.IMPROVE


def test_started_endpoint():
    assert started_endpoint("1 started") == 1
    assert started_endpoint("3 started") == 3
    assert started_endpoint("2 started") is None
    assert started_endpoint("Aggregator started") is None


def test_parse_received():
    assert parse_received("received 42") == 42
    assert parse_received("received  7 extra") == 7
    assert parse_received("sent 42") is None
    assert parse_received(" received 42") is None


@pytest.mark.parametrize("msg", ["received", "received abc", "received 4.5"])
def test_parse_received_malformed(msg):
    with pytest.raises(MalformedMessageError):
        parse_received(msg)
