#!/usr/bin/env python
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
# this script imports dbc-files into a candb Database
# dbc-files are the can-matrix-definitions of the CanOe (Vector Informatic)
#
# the import is one pass over the lines: every line is classified by its
# leading token and applied to the database built so far. signals belong
# to the message declared before them, comments and value descriptions
# find their message by id.

import logging
logger = logging.getLogger('root')

from .assembler import Assembler
from .classifier import classify
from .database import Database
from .tokens import defaultRegistry


class DbcParser(object):

    def __init__(self, **options):
        if 'registry' in options:
            self.registry = options["registry"].copy()
        else:
            self.registry = defaultRegistry()
        self.assembler = Assembler()

    def registerToken(self, identifier, pattern, handler=None, strict=False):
        """
        Add a token to the grammar of this parser. Without a handler lines
        of the new token are recognized but do not change the database.
        """
        self.registry.register(identifier, pattern, strict=strict)
        if handler is not None:
            self.assembler.register(identifier, handler)

    def parseLine(self, line, db, lineNumber=0):
        classified = classify(line, self.registry)
        if classified.token is None:
            if line.strip():
                logger.debug("unrecognized line: %d (%s)" % (lineNumber, line))
            return db
        if classified.groups is None:
            logger.info(
                "Warning: Error decoding line: %d (%s)" %
                (lineNumber, line))
            return db
        return self.assembler.apply(classified, db)

    def parse(self, lines):
        db = Database()
        i = 0
        for line in lines:
            i = i + 1
            db = self.parseLine(line, db, i)
        return db


def parse(lines, **options):
    return DbcParser(**options).parse(lines)


def _decodeLines(f, encoding):
    for line in f:
        if isinstance(line, bytes):
            line = line.decode(encoding)
        yield line.rstrip('\r\n').replace(u"\u2018", u"'").replace(u"\u2019", u"'")


def load(f, **options):
    if 'dbcImportEncoding' in options:
        dbcImportEncoding = options["dbcImportEncoding"]
    else:
        dbcImportEncoding = 'iso-8859-1'
    return parse(_decodeLines(f, dbcImportEncoding), **options)
