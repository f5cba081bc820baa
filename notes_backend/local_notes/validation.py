from typing import List

from local_notes.schemas import NoteDraft

TITLE_REQUIRED = "title required"
CONTENT_REQUIRED = "content required"


# PUBLIC_INTERFACE
def validate(draft: NoteDraft) -> List[str]:
    """Return the error messages for ``draft``; empty when it can be committed."""
    errors = []
    if not draft.title.strip():
        errors.append(TITLE_REQUIRED)
    if not draft.content.strip():
        errors.append(CONTENT_REQUIRED)
    return errors
