"""Operator-facing notification texts shared across controllers."""

UNREACHABLE = "Couldn't reach the server. Please try again."
FILE_UNREADABLE = "Couldn't read the selected file. Please pick another one."
PROFILE_LOAD_FAILED = "Couldn't load your profile right now. Please refresh and try again."
PROFILE_UPDATED = "Profile updated."
PROFILE_SAVE_FAILED = "Couldn't update your profile. Please try again."
IMAGE_UPDATED = "Profile image updated."
IMAGE_UPLOAD_FAILED = "Couldn't upload that image. Please try again."
RESUME_UPDATED = "Resume uploaded."
RESUME_UPLOAD_FAILED = "Couldn't upload the resume. Please try again."
MESSAGE_UPDATED = "Message updated."
MESSAGE_UPDATE_FAILED = "Couldn't update that message. Please try again."
LOGIN_FAILED = "Login failed. Check your username and password."
LOGOUT_FAILED = "Couldn't log you out. Please try again."
