"""
School resolution from email domains.

A user's email host is matched against registered school domains, most
specific first: ``alex@student.kirkwood.edu`` tries ``student.kirkwood.edu``
and then ``kirkwood.edu``. How schools are stored is up to the injected
lookup.
"""

from typing import Awaitable, Callable, Optional, TypeVar

from ..core.errors import InvalidEmailError

SchoolT = TypeVar("SchoolT")

# Exact-match lookup: domain -> school or None
DomainLookup = Callable[[str], Optional[SchoolT]]

HOME_REDIRECT = "/"


def email_domain(email: str) -> str:
    """Return the text after the first '@' of an email address."""
    at_index = email.find("@")
    if at_index < 0:
        raise InvalidEmailError(email)
    return email[at_index + 1:]


def candidate_domains(email: str):
    """Yield domains to try for ``email``, from the full host to its parents.

    Candidates without a '.' are never produced.
    """
    domain = email_domain(email)
    while "." in domain:
        yield domain
        domain = domain[domain.index(".") + 1:]


def resolve_school_for_email(
    email: str, lookup_by_domain: DomainLookup
) -> Optional[SchoolT]:
    """
    Find the school for an email by progressively stripping subdomains.

    Args:
        email: Address to resolve, must contain an '@'
        lookup_by_domain: Exact-match domain lookup returning a school or None

    Returns:
        The first (most specific) matching school, or None

    Raises:
        InvalidEmailError: If ``email`` has no '@'
    """
    for domain in candidate_domains(email):
        school = lookup_by_domain(domain)
        if school is not None:
            return school
    return None


async def resolve_school_for_email_async(
    email: str, lookup_by_domain: Callable[[str], Awaitable[Optional[SchoolT]]]
) -> Optional[SchoolT]:
    """Same as resolve_school_for_email for an awaitable lookup (repositories)."""
    for domain in candidate_domains(email):
        school = await lookup_by_domain(domain)
        if school is not None:
            return school
    return None


def school_slug(domain: str) -> str:
    """School page slug: the domain without its final label."""
    return domain.rsplit(".", 1)[0]


def registration_redirect(school) -> str:
    """Where to send a newly registered user: their school page or home."""
    if school is None:
        return HOME_REDIRECT
    return f"/schools/{school_slug(school.domain)}"
