NUM_COLUMNS = 9
NUM_ROWS = 9

# Shortest run of same-typed cookies that counts as a chain.
MIN_CHAIN_LENGTH = 3

# Upper bound on regenerate-until-playable attempts before giving up.
MAX_SHUFFLE_ATTEMPTS = 200
