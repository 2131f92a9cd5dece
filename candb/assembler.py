# Copyright (c) 2013, Eduard Broecker
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without modification, are permitted provided that
# the following conditions are met:
#
#    Redistributions of source code must retain the above copyright notice, this list of conditions and the
#    following disclaimer.
#    Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the
#    following disclaimer in the documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED
# WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A
# PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY
# DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR
# OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH
# DAMAGE.

#
# applies classified dbc lines to a Database
# lines referencing unknown messages, signals or attributes are dropped,
# a bad line never stops the import

import collections
import re
import logging
logger = logging.getLogger('root')

from .database import (AttributeDefinition, AttributeType, Endianness, Message,
                       Signal, SignalGroup)

_valueDescription = re.compile(
    r'(?P<value>-?\d+)\s+"(?P<description>(?:[^"\\]|\\.)*)"')
_quotedItem = re.compile(r'"((?:[^"\\]|\\.)*)"')


def toInt(text, field='value'):
    if text is None:
        return None
    try:
        return int(text, 10)
    except ValueError:
        logger.debug("Warning: %s is not an integer (%s)" % (field, text))
        return None


def toFloat(text, field='value'):
    if text is None:
        return None
    try:
        return float(text)
    except ValueError:
        logger.debug("Warning: %s is not a number (%s)" % (field, text))
        return None


def splitNodes(text):
    if not text:
        return []
    return [node for node in re.split(r'[,\s]+', text) if node]


def stripQuotes(text):
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


def extractDefinition(text):
    """
    Read '<int> "<label>"' pairs into an OrderedDict, labels verbatim.
    """
    valueTable = collections.OrderedDict()
    for temp in _valueDescription.finditer(text or ''):
        valueTable[int(temp.group('value'))] = temp.group('description')
    return valueTable


def attributeType(code):
    if code == 'BO_':
        return AttributeType.message
    elif code == 'BU_':
        return AttributeType.node
    elif code == 'SG_':
        return AttributeType.signal
    return AttributeType.globalScope


def enumerationLabels(config):
    if '"' in config:
        labels = _quotedItem.findall(config)
    else:
        labels = re.findall(r'\w+', config)
    return labels or None


def generateAttribute(name, type, dataType, config):
    attribute = AttributeDefinition(name, attributeType(type), dataType)
    # STRING attributes carry no configuration
    if not config:
        return attribute
    if dataType in ('INT', 'HEX', 'FLOAT'):
        convert = toFloat if dataType == 'FLOAT' else toInt
        limits = config.split()
        if len(limits) >= 2:
            attribute.min = convert(limits[0], 'min')
            attribute.max = convert(limits[1], 'max')
    elif dataType == 'ENUM':
        attribute.enumeration = enumerationLabels(config)
    return attribute


class Assembler(object):
    """
    Maps token identifiers to handlers. A handler gets the named captures
    of one line and the Database and changes the Database in place.
    """

    def __init__(self):
        self.handlers = collections.OrderedDict([
            ("VERSION", self.version),
            ("BO_", self.message),
            ("SG_", self.signal),
            ("BU_", self.nodes),
            ("BS_", self.busConfiguration),
            ("CM_", self.comment),
            ("CM_ BU_", self.nodeComment),
            ("CM_ BO_", self.messageComment),
            ("CM_ SG_", self.signalComment),
            ("VAL_TABLE_", self.valueTable),
            ("VAL_", self.signalValues),
            ("BO_TX_BU_", self.transmitters),
            ("BA_DEF_", self.attributeDefinition),
            ("BA_DEF_DEF_", self.attributeDefault),
            ("BA_", self.attributeValue),
            ("SIG_GROUP_", self.signalGroup),
            ("SIG_VALTYPE_", self.signalValueType),
        ])

    def register(self, identifier, handler):
        self.handlers[identifier] = handler

    def apply(self, classified, db):
        if classified.token is None or classified.groups is None:
            return db
        handler = self.handlers.get(classified.token)
        if handler is not None:
            handler(classified.groups, db)
        return db

    def _messageById(self, db, idText):
        id = toInt(idText, 'message id')
        if id is None:
            return None
        message = db.messageById(id)
        if message is None:
            logger.info("Warning: no message with id %d" % id)
        return message

    def _signal(self, db, idText, name):
        message = self._messageById(db, idText)
        if message is None:
            return None
        signal = message.signalByName(name)
        if signal is None:
            logger.info("Warning: no signal %s in message %s" % (name, message.name))
        return signal

    def version(self, groups, db):
        db.version = groups['version']

    def message(self, groups, db):
        db.addMessage(Message(groups['messageName'],
                              id=toInt(groups['id'], 'message id'),
                              dlc=toInt(groups['dlc'], 'dlc'),
                              sendingNode=groups.get('sendingNode')))

    def signal(self, groups, db):
        signal = Signal(groups['name'],
                        startBit=toInt(groups['startBit'], 'startBit'),
                        length=toInt(groups['length'], 'length'),
                        endianness=Endianness.intel if groups['endian'] == '1'
                        else Endianness.motorola,
                        signed=(groups['signed'] == '-'),
                        factor=toFloat(groups['factor'], 'factor'),
                        offset=toFloat(groups['offset'], 'offset'),
                        min=toFloat(groups['min'], 'min'),
                        max=toFloat(groups['max'], 'max'),
                        unit=groups['unit'],
                        receivingNodes=splitNodes(groups['receivingNodes']),
                        multiplex=groups.get('plex'))
        db.addSignalToLastMessage(signal)

    def nodes(self, groups, db):
        db.canNodes = groups['nodes'].split()

    def busConfiguration(self, groups, db):
        if groups.get('speed') is not None:
            db.busConfiguration = toInt(groups['speed'], 'baudrate')

    def comment(self, groups, db):
        db.description = groups['comment']

    def nodeComment(self, groups, db):
        if groups['name'] in db.canNodes:
            db.nodeDescriptions[groups['name']] = groups['comment']
        else:
            logger.info("Warning: no node %s" % groups['name'])

    def messageComment(self, groups, db):
        message = self._messageById(db, groups['id'])
        if message is not None:
            message.description = groups['comment']

    def signalComment(self, groups, db):
        signal = self._signal(db, groups['id'], groups['name'])
        if signal is not None:
            signal.description = groups['comment']

    def valueTable(self, groups, db):
        db.addValueTable(groups['name'], extractDefinition(groups['definition']))

    def signalValues(self, groups, db):
        if toInt(groups['id']) is None:
            logger.info("Warning: enviroment variables currently not supported")
            return
        signal = self._signal(db, groups['id'], groups['name'])
        if signal is not None:
            signal.valueTable = extractDefinition(groups['definition'])

    def transmitters(self, groups, db):
        message = self._messageById(db, groups['id'])
        if message is not None:
            for node in splitNodes(groups['nodes']):
                message.addTransmitter(node)

    def attributeDefinition(self, groups, db):
        db.addAttributeDefinition(generateAttribute(
            groups['name'], groups.get('type'), groups['dataType'],
            groups.get('config')))

    def attributeDefault(self, groups, db):
        attribute = db.attributes.get(groups['name'])
        if attribute is None:
            logger.info("Warning: default for unknown attribute %s" % groups['name'])
            return
        if groups.get('data'):
            attribute.value = stripQuotes(groups['data'])
        else:
            attribute.value = ''

    def attributeValue(self, groups, db):
        name = groups['name']
        value = stripQuotes(groups.get('data') or '')
        if groups.get('messageId') is not None:
            message = self._messageById(db, groups['messageId'])
            if message is not None:
                message.attributes[name] = value
        elif groups.get('signalMessageId') is not None:
            signal = self._signal(db, groups['signalMessageId'], groups['signalName'])
            if signal is not None:
                signal.attributes[name] = value
        elif groups.get('nodeName') is not None:
            node = groups['nodeName']
            if node in db.canNodes:
                db.nodeAttributes.setdefault(node, collections.OrderedDict())[name] = value
            else:
                logger.info("Warning: no node %s" % node)
        elif groups.get('envVar') is not None:
            logger.info("Warning: enviroment variables currently not supported")
        else:
            db.attributeValues[name] = value

    def signalGroup(self, groups, db):
        message = self._messageById(db, groups['id'])
        if message is not None:
            message.signalGroups[groups['name']] = SignalGroup(
                groups['name'], toInt(groups['repetitions'], 'repetitions'),
                groups['signals'].split())

    def signalValueType(self, groups, db):
        signal = self._signal(db, groups['id'], groups['name'])
        if signal is not None:
            signal.isFloat = toInt(groups['valueType'], 'value type') in (1, 2)
