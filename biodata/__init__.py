"""Backend package: DB models, handlers, API.

Stores experts and their education, work experience, skills,
certifications, projects and documents, and serves profile, search and
export views over them.
"""
