"""Block Chunker: cut converted text into Notion-sized paragraph pieces."""

BLOCK_LIMIT = 2000   # Notion rich-text content limit per block


def chunk_text(text: str, size: int = BLOCK_LIMIT) -> list[str]:
    """Split text into contiguous slices of at most `size` characters.

    Plain length cutting: words and markup may be split across slices.
    Empty text gives an empty list.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [text[i:i + size] for i in range(0, len(text), size)]
