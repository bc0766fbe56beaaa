# app/shared/__init__.py
"""
Infraestructura compartida: configuración, logging y base de datos.

No inicializa settings en import-time para evitar efectos colaterales
durante la recolección de tests.
"""
# fin del archivo
