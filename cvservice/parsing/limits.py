MAX_EXTRACTED_CHARACTERS = 2_500_000
MAX_RESULT_CHARACTERS = 2_000_000
MAX_ARRAY_SEGMENT_CHARACTERS = 200_000
