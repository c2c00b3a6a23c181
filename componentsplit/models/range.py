from pydantic import BaseModel


class SourceSpan(BaseModel):
    """Byte and line range of a top-level statement scheduled for removal"""
    start_byte: int
    end_byte: int
    start_line: int
    end_line: int
    model_config = {'frozen': True}

    @property
    def length(self) -> int:
        return self.end_byte - self.start_byte
