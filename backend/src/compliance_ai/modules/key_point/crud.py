"""CRUD operations for key point entities using FastCRUD."""

from fastcrud import FastCRUD

from .models import KeyPoint

key_point_crud: FastCRUD = FastCRUD(KeyPoint)
