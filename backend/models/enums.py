"""Enumerations shared by the models, services and request schemas."""

import enum


class Role(str, enum.Enum):
    STUDENT = 'STUDENT'
    PARENT = 'PARENT'


class ApplicationType(str, enum.Enum):
    EARLY_DECISION = 'EARLY_DECISION'
    EARLY_ACTION = 'EARLY_ACTION'
    REGULAR_DECISION = 'REGULAR_DECISION'
    ROLLING_ADMISSION = 'ROLLING_ADMISSION'


class ApplicationStatus(str, enum.Enum):
    NOT_STARTED = 'NOT_STARTED'
    IN_PROGRESS = 'IN_PROGRESS'
    SUBMITTED = 'SUBMITTED'
    UNDER_REVIEW = 'UNDER_REVIEW'
    DECISION_RECEIVED = 'DECISION_RECEIVED'


class DecisionType(str, enum.Enum):
    ACCEPTED = 'ACCEPTED'
    REJECTED = 'REJECTED'
    WAITLISTED = 'WAITLISTED'
    DEFERRED = 'DEFERRED'


class RequirementType(str, enum.Enum):
    ESSAY = 'ESSAY'
    RECOMMENDATION_LETTER = 'RECOMMENDATION_LETTER'
    TRANSCRIPT = 'TRANSCRIPT'
    TEST_SCORES = 'TEST_SCORES'
    PORTFOLIO = 'PORTFOLIO'
    INTERVIEW = 'INTERVIEW'
    SUPPLEMENTAL_MATERIALS = 'SUPPLEMENTAL_MATERIALS'


class RequirementStatus(str, enum.Enum):
    NOT_STARTED = 'NOT_STARTED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    SUBMITTED = 'SUBMITTED'


class DocumentType(str, enum.Enum):
    ESSAY = 'ESSAY'
    PERSONAL_STATEMENT = 'PERSONAL_STATEMENT'
    TRANSCRIPT = 'TRANSCRIPT'
    RECOMMENDATION_LETTER = 'RECOMMENDATION_LETTER'
    TEST_SCORES = 'TEST_SCORES'
    PORTFOLIO = 'PORTFOLIO'
    RESUME = 'RESUME'
    FINANCIAL_AID = 'FINANCIAL_AID'
    SUPPLEMENTAL_ESSAY = 'SUPPLEMENTAL_ESSAY'
    OTHER = 'OTHER'
