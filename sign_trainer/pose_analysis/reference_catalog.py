import os
from types import MappingProxyType
from typing import NamedTuple, Optional, Tuple

import yaml


class SignReference(NamedTuple):
    """Target hand shape for one sign."""
    sign_id: str
    name: str
    vector: Tuple[float, ...]     # target angles, Thumb -> Pinky
    tolerance: Tuple[float, ...]  # allowed deviation per finger, in degrees
    thumb_index_proximity: bool = False


class ReferenceCatalog:
    """
    Read-only lookup table from sign id to SignReference.

    Entries keep the order they were declared in, which is also the order
    lessons advance through.
    """

    def __init__(self, references=()):
        entries = {}
        for reference in references:
            entries[reference.sign_id] = reference
        self._entries = MappingProxyType(entries)

    @classmethod
    def from_mapping(cls, signs):
        """
        Builds a catalog from raw catalog data.

        Args:
            signs (dict): {sign_id: {'name', 'vector', 'tolerance', 'constraints'}}.
                          Malformed entries are reported and skipped.

        Returns:
            ReferenceCatalog
        """
        references = []
        if not isinstance(signs, dict):
            print(f"Warning: Sign catalog should be a mapping of sign ids. Found: {type(signs).__name__}")
            return cls()

        for sign_id, entry in signs.items():
            reference = _parse_entry(str(sign_id), entry)
            if reference is not None:
                references.append(reference)
        return cls(references)

    @classmethod
    def load(cls, catalog_path):
        """
        Loads a catalog from a YAML file with a top-level 'signs' mapping.

        Missing or unreadable files are reported and produce an empty catalog,
        so every sign will compare as unknown instead of crashing the host.
        """
        try:
            with open(catalog_path, 'r') as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            print(f"Error: Sign catalog not found at '{catalog_path}'.")
            return cls()
        except yaml.YAMLError as e:
            print(f"Error: Could not parse sign catalog '{catalog_path}'.")
            print(f"YAML Error: {e}")
            return cls()

        if not data or 'signs' not in data:
            print(f"Warning: Sign catalog '{catalog_path}' has no 'signs' section.")
            return cls()
        return cls.from_mapping(data['signs'])

    @classmethod
    def from_config(cls, config_manager):
        """Loads the catalog file named by the 'catalog.path' setting."""
        catalog_path = config_manager.get_setting('catalog.path', 'config/signs.yaml')
        if not os.path.isabs(catalog_path):
            base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
            catalog_path = os.path.join(base_dir, catalog_path)
        return cls.load(catalog_path)

    def get(self, sign_id) -> Optional[SignReference]:
        return self._entries.get(sign_id)

    def sign_ids(self):
        return list(self._entries.keys())

    def __contains__(self, sign_id):
        return sign_id in self._entries

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"ReferenceCatalog(signs={self.sign_ids()})"


def _parse_entry(sign_id, entry):
    if not isinstance(entry, dict):
        print(f"Warning: Sign '{sign_id}' is malformed and was skipped. Found: {entry}")
        return None

    try:
        vector = tuple(float(v) for v in entry['vector'])
        tolerance = tuple(float(v) for v in entry['tolerance'])
    except (KeyError, TypeError, ValueError):
        print(f"Warning: Sign '{sign_id}' needs numeric 'vector' and 'tolerance' lists. Skipped.")
        return None

    if len(vector) != 5 or len(tolerance) != 5:
        print(f"Warning: Sign '{sign_id}' should have 5 target angles and 5 tolerances. Skipped.")
        return None
    if any(t <= 0 for t in tolerance):
        print(f"Warning: Sign '{sign_id}' has a non-positive tolerance {tolerance}. Skipped.")
        return None

    constraints = entry.get('constraints') or {}
    if not isinstance(constraints, dict):
        print(f"Warning: Sign '{sign_id}' has malformed constraints {constraints}. Ignoring them.")
        constraints = {}
    return SignReference(
        sign_id=sign_id,
        name=str(entry.get('name', sign_id)),
        vector=vector,
        tolerance=tolerance,
        thumb_index_proximity=bool(constraints.get('thumb_index_proximity', False)),
    )
