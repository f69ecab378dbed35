# mentorship_api/utils/response_enricher.py
from typing import Dict, Any, List, Optional
from ..models import MentorshipRequest
from ..schemas import MentorshipRequestResponse

class ResponseEnricher:
    @staticmethod
    def enrich_requests(requests: List[MentorshipRequest], current_user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """Enriches mentorship requests with mentor/mentee usernames"""
        enriched = []
        for req in requests:
            req_dict = MentorshipRequestResponse.model_validate(req).model_dump()
            req_dict['mentor_name'] = req.mentor.username if req.mentor else f"User {req.mentor_id}"
            req_dict['mentee_name'] = req.mentee.username if req.mentee else f"User {req.mentee_id}"
            if current_user_id is not None:
                req_dict['is_mine'] = req.mentee_id == current_user_id
            enriched.append(req_dict)
        return enriched

    @staticmethod
    def enrich_single_request(request: MentorshipRequest, current_user_id: Optional[int] = None) -> Dict[str, Any]:
        """Enriches a single mentorship request"""
        return ResponseEnricher.enrich_requests([request], current_user_id)[0]
