"""
Contact actions for a centre, routed through the click-tracking redirect
"""
import re
from typing import Optional
from urllib.parse import urlencode
from podsee.services.centre_catalog import Centre, CONTACT_WHATSAPP

REDIRECT_PATH = '/api/r'


def contact_digits(centre: Centre) -> str:
    return re.sub(r'\s', '', str(centre.contact_number or ''))


def resolve_contact_destination(centre: Centre) -> Optional[str]:
    """
    Primary contact link for a centre

    WhatsApp centres get a wa.me link; call centres, and centres of unknown
    contact type that still have a number, get a tel: link.

    Returns:
        Destination URL, or None when the centre has no number
    """
    number = contact_digits(centre)
    if not number:
        return None

    if centre.contact_type == CONTACT_WHATSAPP:
        return f"https://wa.me/{number}"
    return f"tel:{number}"


def build_redirect_url(centre_id: str, destination: str) -> str:
    return f"{REDIRECT_PATH}?{urlencode({'centreId': centre_id, 'to': destination})}"


def contact_actions(centre: Centre) -> list:
    """Buttons shown on the centre detail, each going through the redirect endpoint"""
    actions = []

    destination = resolve_contact_destination(centre)
    if destination:
        action_type = 'WhatsApp' if centre.contact_type == CONTACT_WHATSAPP else 'Call'
        actions.append({
            'type': action_type,
            'label': action_type,
            'destination': destination,
            'href': build_redirect_url(centre.centre_id, destination),
        })

    if centre.website_url:
        actions.append({
            'type': 'Website',
            'label': 'Visit Website',
            'destination': centre.website_url,
            'href': build_redirect_url(centre.centre_id, centre.website_url),
        })

    return actions
