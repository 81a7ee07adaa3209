# Career Clarified - Career Coaching API
"""
Career Clarified - API backend for the career-coaching dashboard.

Resume parsing, AI-generated content (blog posts, resume enhancement),
tier-based AI usage quotas, auth proxying, and job tracking.
"""

__version__ = "1.0.0"
__author__ = "Career Clarified"
__description__ = "Career coaching API: AI content, resume parsing, job tracking"
