"""
mentee_api - HTTP service for the mentee learning portal.

Question catalogue, maths answer grading with attempt history, and
progress dashboards on top of a document store.
"""
