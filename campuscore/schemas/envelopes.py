from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict, Any


class ResultItem(BaseModel):
    """One per-record outcome inside a write envelope"""
    success: bool = False
    data: Optional[Dict[str, Any]] = None
    message: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class MutationEnvelope(BaseModel):
    """
    Write response from the record service.

    `success` means the request was accepted. `results` may hold fewer
    items than were sent.
    """
    success: bool = False
    results: Optional[List[ResultItem]] = None
    message: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def first_result(self) -> Optional[ResultItem]:
        if not self.results:
            return None
        return self.results[0]

    def failure_message(self) -> Optional[str]:
        """Service-reported reason, preferring the envelope message"""
        if self.message:
            return self.message
        for item in self.results or []:
            if not item.success and item.message:
                return item.message
        return None

