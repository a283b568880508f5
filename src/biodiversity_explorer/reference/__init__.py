"""Static reference data.

Constants that don't change with API calls: taxon group presets for
iNaturalist and GBIF, and the iconic-group categories used for filtering.
"""

from biodiversity_explorer.reference.taxa import GBIF_CLASSES as GBIF_CLASSES
from biodiversity_explorer.reference.taxa import GBIF_KINGDOMS as GBIF_KINGDOMS
from biodiversity_explorer.reference.taxa import INAT_TAXA as INAT_TAXA
from biodiversity_explorer.reference.taxa import iconic_category as iconic_category
from biodiversity_explorer.reference.taxa import scope_for_kingdom as scope_for_kingdom
from biodiversity_explorer.reference.taxa import taxon_scope as taxon_scope
