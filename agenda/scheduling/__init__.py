"""
Núcleo de agendamiento por espacio.

Funciones puras y síncronas, sin I/O:
- Aritmética de horas "HH:mm" (timeutils.py)
- Resolución del horario de un día (day_schedule.py)
- Detección de conflictos entre citas (conflicts.py)
- Grilla espacio × hora con span/skip (grid.py)
"""
