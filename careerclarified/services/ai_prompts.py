"""
Career Clarified - AI Prompt Templates

Prompt templates for the AI-powered endpoints. Written for general
instruction-tuned chat models (gpt-4o, gpt-4o-mini).
"""

# -----------------------------------------------------------------------------
# Resume Parsing Prompts
# -----------------------------------------------------------------------------
RESUME_PARSE_PROMPT = """I am providing the raw text extracted from a resume. Analyze it and return a structured JSON object. Return only valid JSON, no markdown or extra text.

CRITICAL: You MUST do the following:

1) PROFESSIONAL EXPERIENCE (required)
   - Extract the "Professional Experience" / "Work Experience" / "Employment" section.
   - Look for company names, dates, and job titles (e.g. "Senior Accounts Receivable", "Collector", "AR Specialist").
   - Even if formatting is complex or section headers vary, identify at least the most recent role.
   - Put the most recent job title into personalInfo.jobTitle.
   - Populate the experience array with at least one entry; prefer chronological order (most recent first).

2) STRICT SCHEMA
   - personalInfo: must include fullName, email, phone, location, and jobTitle (current/most recent job title).
   - experience: must be an array of objects. Each object must contain: company, position, location, duration. You may also include startDate, endDate, description, achievements.
   - skills: technical (array of strings), soft (array of strings). Optional: languages.

3) TITLE FALLBACK (validation)
   - If you cannot find an explicit job title in the resume, infer one from the most dominant technical skills.
   - Never leave personalInfo.jobTitle empty; use an inferred title when necessary.

Output JSON shape (use these exact keys):
{
  "personalInfo": {
    "fullName": "string",
    "email": "string",
    "phone": "string",
    "location": "string",
    "jobTitle": "string (required: most recent role or inferred from skills)"
  },
  "summary": "string",
  "skills": { "technical": ["string"], "soft": ["string"], "languages": ["string"] },
  "experience": [
    { "company": "string", "position": "string", "location": "string", "duration": "string", "startDate": "string", "endDate": "string", "description": "string", "achievements": ["string"] }
  ],
  "education": [{ "institution": "string", "degree": "string", "field": "string", "graduationDate": "string" }]
}"""

RESUME_PARSE_SYSTEM = (
    "You are an expert resume/CV parser. You MUST extract the Professional Experience section "
    "and populate experience (array) and personalInfo.jobTitle. Use company, position, location, "
    "and duration for each experience entry. If no job title is stated, infer one from dominant "
    "technical skills. Respond with only valid JSON, no markdown."
)

# Used when the PDF yielded no text (scanned or image-only files)
RESUME_PARSE_FALLBACK_SYSTEM = (
    "You are an expert resume/CV parser. Text extraction from the PDF failed (e.g. image-only or "
    "scanned PDF). Return valid JSON with: personalInfo (including jobTitle, infer from context if "
    "needed), skills (technical, soft), experience (array of objects with company, position, "
    "location, duration). Never leave experience as empty or personalInfo.jobTitle missing; infer "
    "from any visible text or use a placeholder like \"Professional\" if necessary. Return only "
    "valid JSON, no markdown or extra text."
)

RESUME_PARSE_FALLBACK_PROMPT = """Could not extract text from this PDF. Here is a base64 snippet of the file (first portion). Please try to interpret it as a document and return a structured JSON resume object where possible; use empty strings or empty arrays for unknown fields.

Base64 snippet:
{base64_snippet}"""


# -----------------------------------------------------------------------------
# Resume Enhancement Prompts
# -----------------------------------------------------------------------------
ENHANCE_EXPERIENCE_SYSTEM = (
    "You are a professional resume writer specializing in creating compelling, results-oriented "
    "experience descriptions that highlight achievements and impact. Format your responses as "
    "bullet points, one per line."
)

ENHANCE_EXPERIENCE_PROMPT = """Rewrite the following work experience description into 3-4 professional, results-oriented bullet points suitable for a resume. Each bullet point should:
- Start with a strong action verb
- Be concise and impactful
- Highlight achievements, responsibilities, and impact
- Use quantifiable metrics when possible
- Be tailored for a {job_title} position

Original Description:
{description}

Enhanced Description (format as bullet points, one per line):"""

ENHANCE_SUMMARY_SYSTEM = (
    "You are a professional resume writer specializing in creating compelling and concise resume "
    "summaries that highlight relevant skills and experience for specific job titles."
)

ENHANCE_SUMMARY_PROMPT = """Rewrite the following resume summary to be more professional, concise, and impactful for a {job_title} position. Make it compelling and highlight relevant skills and experience. Keep it to 3-4 sentences maximum.

Original Summary:
{summary}

Enhanced Summary:"""

ENHANCE_TEXT_SYSTEM = (
    "You are an expert resume editor. Rewrite the following text to be more professional, "
    "concise, action-oriented, and grammatically correct. Do not add conversational filler. "
    "Just return the improved text."
)


# -----------------------------------------------------------------------------
# Blog Generation Prompts
# -----------------------------------------------------------------------------
BLOG_SYSTEM_PROMPT = (
    "You are an expert Career Coach. Write an SEO-optimized blog post about {topic}. "
    "Use H2 and H3 tags for structure. The tone should be authoritative but encouraging."
)

# The feature link is woven into the article as organic, helpful content
BLOG_USER_PROMPT = """Write a comprehensive, SEO-optimized blog post about "{topic}".

Requirements:
1. Use H2 tags for main sections and H3 tags for subsections
2. Write in an authoritative but encouraging tone
3. The article should be well-structured with an introduction, body paragraphs, and conclusion
4. Include practical tips and actionable advice
5. Somewhere in the article (naturally, not forced), mention that readers can solve this problem using {target_feature} and hyperlink it to {feature_path}
6. The link should feel organic and helpful, not like an advertisement
7. Aim for approximately 1000-1500 words
8. Format the content in HTML with proper heading tags

Return the full HTML content of the blog post."""


# -----------------------------------------------------------------------------
# Prompt Registry - for viewing via API
# -----------------------------------------------------------------------------
ALL_PROMPTS = {
    "resume_parse": RESUME_PARSE_PROMPT,
    "resume_parse_system": RESUME_PARSE_SYSTEM,
    "resume_parse_fallback_system": RESUME_PARSE_FALLBACK_SYSTEM,
    "resume_parse_fallback": RESUME_PARSE_FALLBACK_PROMPT,
    "enhance_experience": ENHANCE_EXPERIENCE_PROMPT,
    "enhance_summary": ENHANCE_SUMMARY_PROMPT,
    "enhance_text_system": ENHANCE_TEXT_SYSTEM,
    "blog_system": BLOG_SYSTEM_PROMPT,
    "blog_user": BLOG_USER_PROMPT,
}


def get_prompt(name: str) -> str:
    """Get a prompt template by name."""
    return ALL_PROMPTS.get(name, "")
