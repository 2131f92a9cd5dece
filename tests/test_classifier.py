import pytest

from candb.classifier import candidateTokens, classify
from candb.tokens import TokenRegistry, defaultRegistry


@pytest.fixture
def registry():
    return defaultRegistry()


def test_unrecognized_line(registry):
    result = classify("FOO_ bar", registry)
    assert result.token is None
    assert result.groups is None


def test_blank_line(registry):
    assert classify("", registry).token is None
    assert classify("   ", registry).token is None


@pytest.mark.parametrize("line,token", [
    ('CM_ "database comment";', "CM_"),
    ('CM_ BO_ 100 "message comment";', "CM_ BO_"),
    ('CM_ SG_ 100 Speed "signal comment";', "CM_ SG_"),
    ('CM_ BU_ Node1 "node comment";', "CM_ BU_"),
    ('VAL_TABLE_ OnOff 0 "Off" 1 "On" ;', "VAL_TABLE_"),
    ('VAL_ 100 Speed 0 "Off" ;', "VAL_"),
    ('BA_DEF_ BO_ "GenMsgCycleTime" INT 0 65535;', "BA_DEF_"),
    ('BA_DEF_DEF_ "GenMsgCycleTime" 0;', "BA_DEF_DEF_"),
    ('BA_ "GenMsgCycleTime" BO_ 100 20;', "BA_"),
    ('BO_TX_BU_ 100 : Node1,Node2;', "BO_TX_BU_"),
    ('BO_ 100 TestMessage: 8 Node1', "BO_"),
])
def test_longest_prefix_wins(registry, line, token):
    assert classify(line, registry).token == token


def test_all_candidates_are_reported(registry):
    assert candidateTokens('CM_ SG_ 100 Speed "x";', registry) == ["CM_", "CM_ SG_"]


def test_signal_comment_is_not_a_database_comment(registry):
    result = classify('CM_ SG_ 100 Speed "signal comment";', registry)
    assert result.groups == {'id': '100', 'name': 'Speed', 'comment': 'signal comment'}


def test_indented_signal(registry):
    line = ' SG_ TestSignal : 0|8@1+ (1,0) [0|255] "" Node2'
    result = classify(line, registry)
    assert result.token == "SG_"
    assert result.groups['name'] == "TestSignal"


def test_capture_uses_untrimmed_line(registry):
    # symbol lists below NS_ are indented keywords, they must not be read as data
    result = classify('\tBA_DEF_', registry)
    assert result.token == "BA_DEF_"
    assert result.groups is None


def test_recognized_but_malformed(registry):
    result = classify('BO_ 100', registry)
    assert result.token == "BO_"
    assert result.groups is None


def test_escaped_quotes_are_kept(registry):
    result = classify(r'CM_ BO_ 1 "say \"hi\"";', registry)
    assert result.groups['comment'] == r'say \"hi\"'


def test_pattern_without_named_groups_yields_empty_captures():
    registry = TokenRegistry([("NS_", r'^NS_\s*:')])
    result = classify("NS_ :", registry)
    assert result.token == "NS_"
    assert result.groups == {}


def test_reregistered_token_uses_new_pattern():
    registry = TokenRegistry([("AB", r'^AB(?P<first>.*)'), ("A", r'^A(?P<short>.*)')])
    registry.register("AB", r'^AB(?P<second>.*)')
    result = classify("ABC", registry)
    assert result.token == "AB"
    assert result.groups == {'second': 'C'}
