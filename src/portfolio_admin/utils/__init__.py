"""Utility functions and helpers"""

from portfolio_admin.utils.display import (
    format_timestamp,
    preview_text,
    prompt_for_image_file,
    prompt_for_resume_file,
)
from portfolio_admin.utils.forms import (
    encode_body,
    file_part,
    join_list,
    populate_form,
    serialize_form,
    split_list,
)

__all__ = [
    "encode_body",
    "file_part",
    "format_timestamp",
    "join_list",
    "populate_form",
    "preview_text",
    "prompt_for_image_file",
    "prompt_for_resume_file",
    "serialize_form",
    "split_list",
]
