"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CopyType(StrEnum):
    """Message category a copy item is written for."""

    TWEET = "tweet"
    COLD_EMAIL = "cold_email"
    COLD_CALL = "cold_call"
    SALES_PITCH = "sales_pitch"
    FOLLOW_UP_EMAIL = "follow_up_email"
    NURTURE_EMAIL = "nurture_email"
    LINKEDIN_MESSAGE = "linkedin_message"
    AD_COPY = "ad_copy"
    FACEBOOK_AD = "facebook_ad"
    GOOGLE_AD = "google_ad"
    LANDING_PAGE = "landing_page"
    EMAIL_SUBJECT = "email_subject"
    NEWSLETTER = "newsletter"
    BLOG_POST = "blog_post"
    CASE_STUDY = "case_study"
    TESTIMONIAL = "testimonial"
    TAGLINE = "tagline"
    SLOGAN = "slogan"
    PRODUCT_DESCRIPTION = "product_description"
    CALL_TO_ACTION = "call_to_action"
    SOCIAL_POST = "social_post"
    INSTAGRAM_POST = "instagram_post"
    INSTAGRAM_STORY = "instagram_story"
    VIDEO_SCRIPT = "video_script"
    WEBINAR_SCRIPT = "webinar_script"
    PRESS_RELEASE = "press_release"
    PROPOSAL = "proposal"
    OBJECTION_HANDLING = "objection_handling"
    FAQ = "faq"
    BLURB = "blurb"
    OTHER = "other"


class CopyStatus(StrEnum):
    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    PUBLISHED = "published"
    ARCHIVED = "archived"
