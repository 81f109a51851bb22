class FLVDecodeError(Exception):
    """Base exception for all fatal FLV decode conditions."""

    kind = "DecodeError"

    def __init__(self, message: str, offset: int | None = None, tag_index: int | None = None):
        self.message = message
        self.offset = offset
        self.tag_index = tag_index
        super().__init__(message)

    def __str__(self) -> str:
        location = []
        if self.tag_index is not None:
            location.append(f"tag {self.tag_index}")
        if self.offset is not None:
            location.append(f"offset {self.offset} (0x{self.offset:X})")
        if location:
            return f"{self.kind}: {self.message} at {', '.join(location)}"
        return f"{self.kind}: {self.message}"


class BadSignatureError(FLVDecodeError):
    kind = "BadSignature"

    def __init__(self, signature: bytes, offset: int | None = 0):
        self.signature = signature
        super().__init__(f"expected b'FLV' signature, got {signature!r}", offset)


class TruncatedInputError(FLVDecodeError):
    kind = "TruncatedInput"

    def __init__(self, message: str, offset: int | None = None, requested: int = 0, available: int = 0):
        self.requested = requested
        self.available = available
        super().__init__(message, offset)


class UnderflowInLengthError(TruncatedInputError):
    """A declared size is smaller than the fixed header bytes a decoder must consume."""

    kind = "UnderflowInLength"

    def __init__(self, what: str, declared: int, minimum: int, offset: int | None = None):
        self.declared = declared
        self.minimum = minimum
        super().__init__(
            f"{what} declares {declared} bytes, needs at least {minimum}",
            offset,
            requested=minimum,
            available=declared,
        )


class UnknownTagTypeError(FLVDecodeError):
    kind = "UnknownTagType"

    def __init__(self, tag_type: int, offset: int | None = None):
        self.tag_type = tag_type
        super().__init__(f"unknown tag type {tag_type}", offset)


class UnsupportedValueTypeError(FLVDecodeError):
    kind = "UnsupportedValueType"

    def __init__(self, type_code: int, property_name: str, offset: int | None = None):
        self.type_code = type_code
        self.property_name = property_name
        super().__init__(f"unsupported AMF value type {type_code} for property {property_name!r}", offset)
