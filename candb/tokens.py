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
# grammar of dbc-files: every line kind is identified by the keyword it
# starts with and read by a regular expression with named groups

import collections
import re
import logging
logger = logging.getLogger('root')

from .errors import DuplicateToken

# quoted text, backslash escapes are kept as they are
_QUOTED = r'"(?P<%s>(?:[^"\\]|\\.)*)"'

dbcTokens = [
    ("VERSION", r'^VERSION\s+"(?P<version>.*)"'),
    ("BS_", r'^BS_\s*:\s*(?P<speed>\w+)?'),
    ("BU_", r'^BU_\s*:(?P<nodes>.*)'),
    ("VAL_TABLE_", r'^VAL_TABLE_\s+(?P<name>\w+)\s*(?P<definition>.*?)\s*;\s*$'),
    ("BO_", r'^BO_\s+(?P<id>\w+)\s+(?P<messageName>\w+)\s*:\s*(?P<dlc>\w+)'
            r'(?:\s+(?P<sendingNode>\w+))?'),
    ("SG_", r'^\s*SG_\s+(?P<name>\w+)(?:\s+(?P<plex>M|m\d+M?))?\s*:\s*'
            r'(?P<startBit>\w+)\|(?P<length>\w+)@(?P<endian>[01])(?P<signed>[+-])\s*'
            r'\((?P<factor>[^,)]*),(?P<offset>[^)]*)\)\s*'
            r'\[(?P<min>[^|\]]*)\|(?P<max>[^\]]*)\]\s*'
            r'"(?P<unit>[^"]*)"\s*(?P<receivingNodes>.*)'),
    ("BO_TX_BU_", r'^BO_TX_BU_\s+(?P<id>\w+)\s*:\s*(?P<nodes>[^;]*);'),
    ("CM_", r'^CM_\s+' + _QUOTED % 'comment' + r'\s*;'),
    ("CM_ BU_", r'^CM_\s+BU_\s+(?P<name>\w+)\s+' + _QUOTED % 'comment' + r'\s*;'),
    ("CM_ BO_", r'^CM_\s+BO_\s+(?P<id>\w+)\s+' + _QUOTED % 'comment' + r'\s*;'),
    ("CM_ SG_", r'^CM_\s+SG_\s+(?P<id>\w+)\s+(?P<name>\w+)\s+' +
                _QUOTED % 'comment' + r'\s*;'),
    ("BA_DEF_", r'^BA_DEF_\s+(?:(?P<type>BU_|BO_|SG_|EV_)\s+)?"(?P<name>[^"]+)"\s+'
                r'(?P<dataType>INT|HEX|FLOAT|STRING|ENUM)\b\s*(?P<config>.*?)\s*;\s*$'),
    ("BA_DEF_DEF_", r'^BA_DEF_DEF_\s+"(?P<name>[^"]+)"\s*(?P<data>.*?)\s*;\s*$'),
    ("BA_", r'^BA_\s+"(?P<name>[^"]+)"\s+'
            r'(?:BO_\s+(?P<messageId>\w+)\s+'
            r'|SG_\s+(?P<signalMessageId>\w+)\s+(?P<signalName>\w+)\s+'
            r'|BU_\s+(?P<nodeName>\w+)\s+'
            r'|EV_\s+(?P<envVar>\w+)\s+)?'
            r'(?P<data>.*?)\s*;\s*$'),
    ("VAL_", r'^VAL_\s+(?P<id>\w+)\s+(?P<name>\w+)\s*(?P<definition>.*?)\s*;\s*$'),
    ("SIG_GROUP_", r'^SIG_GROUP_\s+(?P<id>\w+)\s+(?P<name>\w+)\s+(?P<repetitions>\w+)'
                   r'\s*:\s*(?P<signals>[^;]*);'),
    ("SIG_VALTYPE_", r'^SIG_VALTYPE_\s+(?P<id>\w+)\s+(?P<name>\w+)\s*:\s*'
                     r'(?P<valueType>\d+)\s*;'),
]


class TokenRegistry(object):
    """
    Ordered mapping of token identifiers to compiled patterns.

    The classifier and the assembler only read from a registry; new tokens
    are added with register().
    """

    def __init__(self, tokens=None):
        self._tokens = collections.OrderedDict()
        for identifier, pattern in tokens or []:
            self.register(identifier, pattern)

    def register(self, identifier, pattern, strict=False):
        if not identifier:
            raise ValueError("token identifier must not be empty")
        if strict and identifier in self._tokens:
            raise DuplicateToken(identifier)
        if identifier in self._tokens:
            logger.debug("replacing token %s" % identifier)
        if not hasattr(pattern, 'match'):
            pattern = re.compile(pattern)
        self._tokens[identifier] = pattern

    def lookup(self, identifier):
        return self._tokens.get(identifier)

    def identifiers(self):
        return list(self._tokens.keys())

    def items(self):
        return self._tokens.items()

    def copy(self):
        registry = TokenRegistry()
        registry._tokens = collections.OrderedDict(self._tokens)
        return registry

    def __contains__(self, identifier):
        return identifier in self._tokens

    def __len__(self):
        return len(self._tokens)


def defaultRegistry():
    return TokenRegistry(dbcTokens)
