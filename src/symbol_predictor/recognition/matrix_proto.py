"""
Text-proto codec for matrix records.

Reads and writes the protobuf text layout the trained constants were first
published in:

    rows: 63
    cols: 4
    packed_data: -0.2939860770044298
    packed_data: 0.09723430308772632
    ...

The message type is built at import time with ``packed_data`` as a repeated
double, so values survive a parse/print cycle bit-for-bit.
"""

import logging
from typing import List, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory, text_format

from symbol_predictor.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_PACKAGE = "symbol_predictor"
_MESSAGE_NAME = "MatrixRecord"

_Field = descriptor_pb2.FieldDescriptorProto


def _build_message_class():
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "symbol_predictor/matrix_record.proto"
    file_proto.package = _PACKAGE
    file_proto.syntax = "proto2"

    message = file_proto.message_type.add()
    message.name = _MESSAGE_NAME
    for name, number, field_type, label in (
        ("rows", 1, _Field.TYPE_INT32, _Field.LABEL_OPTIONAL),
        ("cols", 2, _Field.TYPE_INT32, _Field.LABEL_OPTIONAL),
        ("packed_data", 3, _Field.TYPE_DOUBLE, _Field.LABEL_REPEATED),
    ):
        field = message.field.add()
        field.name = name
        field.number = number
        field.type = field_type
        field.label = label

    # Private pool so we never collide with other registered protos
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    descriptor = pool.FindMessageTypeByName(f"{_PACKAGE}.{_MESSAGE_NAME}")
    return message_factory.GetMessageClass(descriptor)


MatrixRecordProto = _build_message_class()


def parse_text_proto(text: str) -> Tuple[int, int, List[float]]:
    """Parse a text-proto matrix record.

    Returns:
        (rows, cols, packed_data) with packed_data in file order

    Raises:
        ConfigurationError: if the text is not a valid matrix record
    """
    message = MatrixRecordProto()
    try:
        text_format.Parse(text, message)
    except text_format.ParseError as e:
        logger.error("Malformed matrix text proto: %s", e)
        raise ConfigurationError(f"Malformed matrix text proto: {e}") from e
    return message.rows, message.cols, list(message.packed_data)


def format_text_proto(rows: int, cols: int, packed_data) -> str:
    """Print a matrix record in text-proto form, one packed_data per line."""
    message = MatrixRecordProto()
    message.rows = rows
    message.cols = cols
    message.packed_data.extend(packed_data)
    return text_format.MessageToString(message)
