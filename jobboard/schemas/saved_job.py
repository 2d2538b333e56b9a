from typing import List

from pydantic import BaseModel


class SavedJobsResponse(BaseModel):
    """Saved-job ids after a save or unsave"""
    message: str
    saved_jobs: List[str]
