"""Object storage for uploaded files (avatars, project images, resumes)."""
