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
# decides which token a single dbc line belongs to

import collections

ClassifiedLine = collections.namedtuple('ClassifiedLine', ['line', 'token', 'groups'])


def candidateTokens(line, registry):
    """
    Identifiers of all tokens the line starts with, in registration order.

    Leading whitespace is ignored here (signals are indented below their
    message) but kept for the pattern match.
    """
    stripped = line.lstrip()
    return [identifier for identifier, _ in registry.items()
            if stripped.startswith(identifier)]


def classify(line, registry):
    """
    Classify one line against the registry.

    The longest matching identifier wins, so 'CM_ SG_' beats 'CM_' and
    'BA_DEF_DEF_' beats 'BA_DEF_' and 'BA_'. Two different identifiers of
    the same length can not both prefix one line; should a registry ever
    produce such a tie, the token registered first is taken.

    Returns a ClassifiedLine:
      token None              -> no token matched
      token set, groups None  -> token matched but the line does not fit its pattern
      token set, groups dict  -> named captures of the pattern
    """
    candidates = candidateTokens(line, registry)
    if not candidates:
        return ClassifiedLine(line, None, None)
    token = max(candidates, key=len)
    temp = registry.lookup(token).search(line)
    if temp is None:
        return ClassifiedLine(line, token, None)
    return ClassifiedLine(line, token, temp.groupdict())
