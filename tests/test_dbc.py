import io
import os

import pytest

from candb import DbcParser, Endianness, TokenRegistry, load, parse
from candb.errors import DuplicateToken

here = os.path.dirname(os.path.abspath(__file__))


def test_message_with_signal():
    db = parse(['BO_ 100 TestMessage: 8 Node1',
                'SG_ TestSignal: 0|32@1+ (1,0) [0|1000] "mV" Node2'])
    assert list(db.messages) == ['TestMessage']
    message = db.messages['TestMessage']
    assert message.id == 100
    assert message.dlc == 8
    assert message.sendingNode == 'Node1'
    assert list(message.signals) == ['TestSignal']
    signal = message.signals['TestSignal']
    assert signal.startBit == 0
    assert signal.length == 32
    assert signal.endianness == Endianness.intel
    assert signal.signed is False
    assert signal.factor == 1
    assert signal.offset == 0
    assert signal.min == 0
    assert signal.max == 1000
    assert signal.unit == 'mV'
    assert signal.receivingNodes == ['Node2']


def test_parse_accepts_generators():
    lines = (line for line in ['VERSION "x"', '', 'not dbc at all'])
    assert parse(lines).version == 'x'


def test_parse_empty_input():
    db = parse([])
    assert db.version is None
    assert len(db.messages) == 0
    assert db.canNodes == []


def test_failing_line_supply_propagates():
    def lines():
        yield 'VERSION "x"'
        raise IOError("disk gone")

    with pytest.raises(IOError):
        parse(lines())


def test_partial_parse_is_usable():
    parser = DbcParser()
    db = parser.parse(['BO_ 100 TestMessage: 8 Node1'])
    db = parser.parseLine(' SG_ A : 0|8@1+ (1,0) [0|255] "" Node2', db)
    assert list(db.messages['TestMessage'].signals) == ['A']


def test_register_token_with_handler():
    def environment(groups, db):
        db.attributeValues['env:' + groups['name']] = groups['unit']

    parser = DbcParser()
    parser.registerToken('EV_', r'^EV_\s+(?P<name>\w+)\s*:.*"(?P<unit>[^"]*)"',
                         handler=environment)
    db = parser.parse(['EV_ Speed: 0 [0|100] "kmh" 0 1 DUMMY_NODE_VECTOR0 Vector__XXX;'])
    assert db.attributeValues['env:Speed'] == 'kmh'


def test_register_token_without_handler_is_recognized_only():
    parser = DbcParser()
    parser.registerToken('EV_', r'^EV_\s+(?P<name>\w+)')
    db = parser.parse(['EV_ Speed: 0;'])
    assert db.attributeValues == {}


def test_register_token_strict():
    with pytest.raises(DuplicateToken):
        DbcParser().registerToken('BO_', r'^BO_', strict=True)


def test_custom_registry_option():
    registry = TokenRegistry([('VERSION', r'^VERSION\s+"(?P<version>.*)"')])
    db = parse(['VERSION "1"', 'BO_ 1 A: 8 Node1'], registry=registry)
    assert db.version == '1'
    assert len(db.messages) == 0


def test_parsers_do_not_share_grammar():
    first = DbcParser()
    first.registerToken('EV_', r'^EV_')
    assert 'EV_' not in DbcParser().registry


def test_load_bytes_with_encoding():
    f = io.BytesIO(u'BO_ 1 A: 8 Node1\r\nCM_ BO_ 1 "Temperatur °C";\r\n'.encode('iso-8859-1'))
    db = load(f)
    assert db.messages['A'].description == u'Temperatur °C'


def test_load_utf8_option():
    f = io.BytesIO(u'CM_ "Grüße";\n'.encode('utf-8'))
    assert load(f, dbcImportEncoding='utf-8').description == u'Grüße'


def test_load_normalizes_typographic_quotes():
    f = io.StringIO(u'CM_ "driver’s door";\n')
    assert load(f).description == "driver's door"


@pytest.fixture
def db():
    with open(os.path.join(here, "files", "test.dbc"), "rb") as f:
        return load(f)


def test_file_header(db):
    assert db.version == '1.0'
    assert db.busConfiguration is None
    assert db.canNodes == ['Engine', 'Gateway', 'Dash']
    assert db.description == 'Demo vehicle network'
    assert db.nodeDescriptions['Engine'] == 'Engine control unit'


def test_file_messages(db):
    assert list(db.messages) == ['EngineData', 'BrakeStatus']
    engine = db.messages['EngineData']
    assert engine.description == 'Periodic engine values'
    assert list(engine.signals) == ['EngineSpeed', 'EngineTemp', 'Gear']
    assert engine.signals['EngineSpeed'].description == 'Crankshaft speed'
    assert engine.signals['EngineSpeed'].receivingNodes == ['Gateway', 'Dash']
    assert engine.signals['EngineTemp'].signed is True
    assert engine.signals['EngineTemp'].offset == -40
    brake = db.messages['BrakeStatus']
    assert brake.additionalTransmitters == ['Engine']
    assert brake.signals['BrakeMode'].multiplex == 'M'
    assert brake.signals['Pressure'].multiplex == 'm1'
    assert brake.signals['Pressure'].endianness == Endianness.motorola
    assert brake.signals['Pressure'].isFloat is True
    assert brake.signalGroups['Brakes'].signalNames == ['BrakeMode', 'Pressure']


def test_file_value_tables(db):
    gears = [(0, 'Park'), (1, 'Reverse'), (2, 'Neutral'), (3, 'Drive')]
    assert list(db.valueTables['GearTable'].items()) == gears
    assert list(db.messages['EngineData'].signals['Gear'].valueTable.items()) == gears


def test_file_attributes(db):
    assert list(db.attributes) == ['GenMsgCycleTime', 'GenSigStartValue',
                                   'NodeLayer', 'BusType']
    assert db.attributes['GenMsgCycleTime'].value == '0'
    assert db.attributes['GenSigStartValue'].max == 100000.0
    assert db.attributes['NodeLayer'].enumeration == ['CAN', 'J1939']
    assert db.attributes['BusType'].value == ''
    assert db.attributeValues['BusType'] == 'CAN'
    assert db.messages['EngineData'].attributes['GenMsgCycleTime'] == '10'
    temp = db.messages['EngineData'].signals['EngineTemp']
    assert temp.attributes['GenSigStartValue'] == '40'
    assert db.nodeAttributes['Engine']['NodeLayer'] == '0'
