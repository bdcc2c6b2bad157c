"""
Constants shared across indelcal
"""
from frozendict import frozendict

# Keys of the calibration document
MAX_MOTIF_KEY = "MaxMotifLength"
MAX_TRACT_KEY = "MaxTractLength"
MODEL_KEY = "Model"
HEADER_KEYS = frozendict({'Name': 'name', 'Type': 'model_type', 'Version': 'version', 'Date': 'date'})

# Model type written by the calibration tooling for the indel error model
INDEL_MODEL_TYPE = "IndelModel"

# Multiplier on the probability that a true allele is masked as reference
DEFAULT_REF_ERROR_FACTOR = 1.0

# Spellings accepted for indel types in report tables and on the command line
INDEL_TYPE_ALIASES = frozendict({
    'I': 'INSERT', 'INS': 'INSERT', 'INSERT': 'INSERT', 'INSERTION': 'INSERT',
    'D': 'DELETE', 'DEL': 'DELETE', 'DELETE': 'DELETE', 'DELETION': 'DELETE',
})

# Report table layout
REPORT_REQUIRED_COLUMNS = ('type', 'repeat_unit_length', 'ref_repeat_count', 'indel_repeat_count')
REPORT_OPTIONAL_COLUMNS = ('observed_homopolymer_length', 'description')
ESTIMATE_OUTPUT_COLUMNS = ('description', 'type', 'repeat_unit_length', 'ref_repeat_count',
                           'indel_repeat_count', 'is_str', 'indel_error_prob', 'ref_error_prob')
