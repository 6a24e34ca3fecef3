"""
magpie.utils.encoding
~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import codecs

DEFAULT_DETECT_ORDER = ('utf-8',)

WESTERN_DETECT_ORDER = (
    'utf-8',
    'ascii',
    'iso-8859-1',
    'iso-8859-2',
    'iso-8859-3',
    'iso-8859-4',
    'iso-8859-5',
    'iso-8859-6',
    'iso-8859-7',
    'iso-8859-8',
    'iso-8859-9',
    'iso-8859-10',
    'iso-8859-13',
    'iso-8859-14',
    'iso-8859-15',
    'iso-8859-16',
    'cp1251',
    'cp1252',
    'cp1254',
)


def force_text(s, detect_order=None):
    """
    Coerces ``s`` into text.

    Bytes are decoded with the first encoding of ``detect_order`` which
    accepts them, and lossily as UTF-8 when none does.
    """
    if isinstance(s, str):
        return s
    if isinstance(s, (bytes, bytearray)):
        for encoding in detect_order or DEFAULT_DETECT_ORDER:
            try:
                codecs.lookup(encoding)
            except LookupError:
                continue
            try:
                return bytes(s).decode(encoding)
            except UnicodeDecodeError:
                continue
        return bytes(s).decode('utf-8', 'replace')
    return str(s)


def to_unicode(value):
    try:
        value = force_text(value)
    except (UnicodeEncodeError, UnicodeDecodeError):
        value = '(Error decoding value)'
    except Exception:  # in some cases we get a different exception
        try:
            value = str(repr(type(value)))
        except Exception:
            value = '(Error decoding value)'
    return value
