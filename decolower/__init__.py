"""
decolower - lowers JavaScript/TypeScript decorators into plain property definitions.
"""
from .core.config import EmitOptions, config
from .core.desugarer import Desugarer, Site
from .core.workspace import BatchReport, Workspace
from .main import DecoLower
from .models.descriptor import PropertyDescriptor
from .models.enums import EmitForm

__version__ = '0.1.0'
__all__ = ['DecoLower', 'Desugarer', 'Site', 'Workspace', 'BatchReport', 'EmitOptions', 'EmitForm',
           'PropertyDescriptor', 'config']
