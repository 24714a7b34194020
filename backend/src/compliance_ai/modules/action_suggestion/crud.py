"""CRUD operations for action suggestion entities using FastCRUD."""

from fastcrud import FastCRUD

from .models import ActionSuggestion

action_suggestion_crud: FastCRUD = FastCRUD(ActionSuggestion)
