# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/repositories.py

Repositorios de solo lectura para usuarios y cursos.

Autor: Academia Backend
Fecha: 2026-10-18
"""

from __future__ import annotations

from app.shared.database.repository import BaseRepository
from .models import AppUser, Course


class UserRepository(BaseRepository[AppUser]):
    def __init__(self):
        super().__init__(AppUser)


class CourseRepository(BaseRepository[Course]):
    def __init__(self):
        super().__init__(Course)
