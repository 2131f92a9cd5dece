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
# in-memory model of a can database as read from dbc-files
# messages and signals keep the order in which they were declared

import collections
import logging
logger = logging.getLogger('root')

from .errors import MessageDoesNotExist, SignalDoesNotExist


class Endianness(object):
    intel, motorola = 'Intel', 'Motorola'


class AttributeType(object):
    message, node, signal, globalScope = 'Message', 'Node', 'Signal', 'Global'


class Signal(object):
    """
    Bit-field inside the payload of a Message.

    valueTable is an OrderedDict (raw value -> label) or None.
    """

    def __init__(self, name, startBit=0, length=0, endianness=Endianness.intel,
                 signed=False, factor=1, offset=0, min=0, max=0, unit='',
                 receivingNodes=None, multiplex=None, description=None,
                 valueTable=None):
        self.name = name
        self.multiplex = multiplex
        self.startBit = startBit
        self.length = length
        self.endianness = endianness
        self.signed = signed
        self.factor = factor
        self.offset = offset
        self.min = min
        self.max = max
        self.unit = unit
        self.receivingNodes = list(receivingNodes or [])
        self.description = description
        self.valueTable = valueTable
        self.isFloat = False
        self.attributes = collections.OrderedDict()

    def __repr__(self):
        return "Signal(%r, startBit=%r, length=%r)" % (
            self.name, self.startBit, self.length)


class SignalGroup(object):
    def __init__(self, name, repetitions, signalNames):
        self.name = name
        self.repetitions = repetitions
        self.signalNames = list(signalNames)


class Message(object):
    """
    A can frame definition. Signals are keyed by name.
    """

    def __init__(self, name, id=None, dlc=None, sendingNode=None,
                 description=None):
        self.name = name
        self.id = id
        self.dlc = dlc
        self.sendingNode = sendingNode
        self.signals = collections.OrderedDict()
        self.description = description
        self.additionalTransmitters = []
        self.signalGroups = collections.OrderedDict()
        self.attributes = collections.OrderedDict()

    def signalByName(self, name):
        return self.signals.get(name)

    def addTransmitter(self, node):
        if node != self.sendingNode and node not in self.additionalTransmitters:
            self.additionalTransmitters.append(node)

    def __repr__(self):
        return "Message(%r, id=%r, dlc=%r)" % (self.name, self.id, self.dlc)


class AttributeDefinition(object):
    """
    Declaration of a user defined attribute (BA_DEF_).

    min/max are only set for INT, HEX and FLOAT, enumeration only for ENUM.
    value holds the default from BA_DEF_DEF_ and stays None until one is read.
    """

    def __init__(self, name, type, dataType, min=None, max=None,
                 enumeration=None, value=None):
        self.name = name
        self.type = type
        self.dataType = dataType
        self.min = min
        self.max = max
        self.enumeration = enumeration
        self.value = value

    def __repr__(self):
        return "AttributeDefinition(%r, %r, %r)" % (
            self.name, self.type, self.dataType)


class Database(object):
    """
    Result of parsing a dbc-file.

    Only the parse that creates a Database writes to it while the parse
    runs; there is one writer and one pass over the lines, so nothing here
    is locked.
    """

    def __init__(self):
        self.version = None
        self.messages = collections.OrderedDict()
        self.description = None
        self.busConfiguration = None
        self.canNodes = []
        self.valueTables = collections.OrderedDict()
        self.attributes = collections.OrderedDict()
        self.attributeValues = collections.OrderedDict()
        self.nodeDescriptions = collections.OrderedDict()
        self.nodeAttributes = collections.OrderedDict()
        # name of the message added last, signals are attached to it
        self._lastMessageName = None

    @property
    def lastMessage(self):
        if self._lastMessageName is None:
            return None
        return self.messages.get(self._lastMessageName)

    def messageByName(self, name):
        return self.messages.get(name)

    def messageById(self, id):
        # ids need not be unique, first declared message wins
        for message in self.messages.values():
            if message.id == id:
                return message
        return None

    def signalByName(self, signalName, messageName):
        message = self.messageByName(messageName)
        if message is None:
            return None
        return message.signalByName(signalName)

    def addMessage(self, message):
        if isinstance(message, (list, tuple)):
            for msg in message:
                self.addMessage(msg)
            return
        # a message replacing one of the same name keeps the old position
        self.messages[message.name] = message
        self._lastMessageName = message.name

    def removeMessage(self, name):
        if name not in self.messages:
            raise MessageDoesNotExist(name)
        del self.messages[name]
        if self._lastMessageName == name:
            self._lastMessageName = next(reversed(self.messages), None)

    def addSignal(self, messageName, signal):
        message = self.messageByName(messageName)
        if message is None:
            raise MessageDoesNotExist(messageName)
        if isinstance(signal, (list, tuple)):
            for sig in signal:
                message.signals[sig.name] = sig
        else:
            message.signals[signal.name] = signal

    def removeSignal(self, signalName, messageName):
        message = self.messageByName(messageName)
        if message is None:
            raise MessageDoesNotExist(messageName)
        if signalName not in message.signals:
            raise SignalDoesNotExist(signalName, messageName)
        del message.signals[signalName]

    def addSignalToLastMessage(self, signal):
        message = self.lastMessage
        if message is None:
            logger.info("Warning: signal %s has no message" % signal.name)
            return None
        message.signals[signal.name] = signal
        return message

    def addValueTable(self, name, valueTable):
        self.valueTables[name] = valueTable

    def addAttributeDefinition(self, definition):
        self.attributes[definition.name] = definition
