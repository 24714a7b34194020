"""CRUD operations for application parameters using FastCRUD."""

from fastcrud import FastCRUD

from .models import ApplicationParameter

parameter_crud: FastCRUD = FastCRUD(ApplicationParameter)
