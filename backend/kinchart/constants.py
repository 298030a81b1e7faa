"""Shared constants."""

# Relation value of the account holder's own family-member row
SELF_RELATION = "Self"
SELF_LABEL = "Self"

# Storage bucket holding uploaded documents
DOCUMENTS_BUCKET = "documents"
SIGNED_URL_DEFAULT_TTL = 3600
SIGNED_URL_MAX_TTL = 7 * 24 * 3600

# Key-value flag recording that the walkthrough has been shown
ONBOARDING_FLAG = "has_seen_onboarding"
