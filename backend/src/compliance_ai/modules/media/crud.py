"""CRUD operations for media entities using FastCRUD."""

from fastcrud import FastCRUD

from .models import Media

media_crud: FastCRUD = FastCRUD(Media)
