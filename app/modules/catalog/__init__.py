# -*- coding: utf-8 -*-
"""
backend/app/modules/catalog/__init__.py

Referencias a entidades externas (usuarios y cursos).

El ciclo de vida completo de usuarios y cursos pertenece a otros
servicios; aquí solo se consultan para validar precondiciones de la
liquidación (existencia y precio del curso).

Autor: Academia Backend
Fecha: 2026-10-18
"""

from .models import AppUser, Course
from .repositories import CourseRepository, UserRepository

__all__ = [
    "AppUser",
    "Course",
    "CourseRepository",
    "UserRepository",
]
