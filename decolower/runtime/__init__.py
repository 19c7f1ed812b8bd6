from .objects import JSFunction, JSObject, SourceValue
from .realm import Realization, Realm
from .resolver import NamespaceResolver

__all__ = ['JSObject', 'JSFunction', 'SourceValue', 'NamespaceResolver', 'Realm', 'Realization']
