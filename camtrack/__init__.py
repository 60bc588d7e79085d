"""
CamTrack
Encuadre automático suavizado a partir de detecciones de caras.
"""

__version__ = '1.0.0'
