"""Resume Insight AI: resume text extraction, PII scan and concurrent LLM analysis."""
