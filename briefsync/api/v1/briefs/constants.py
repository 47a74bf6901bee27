"""Constants for brief routes."""

CONTENT_BRIEF_NOT_FOUND_DETAIL = "Content brief not found"
