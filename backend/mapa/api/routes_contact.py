import logging

from fastapi import APIRouter, status

from mapa.models.schemas import ContactRequest, ContactResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/contact", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def submit_contact(payload: ContactRequest) -> ContactResponse:
    logger.info("Contact inquiry from %s <%s>", payload.name, payload.email)
    return ContactResponse(
        message="Thank you for your inquiry! We'll contact you shortly.",
        data=payload,
    )
