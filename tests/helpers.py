BASE_TIME = 1_700_000_000_000
