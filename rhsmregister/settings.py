# This file is part of rhsm-register. See LICENSE file for license information.

# Set and read for determining the config file location
CFG_ENV_NAME = "RHSM_REGISTER_CFG"

# This is expected to be a yaml formatted file
REGISTER_CONFIG = "/etc/rhsm-register/register.cfg"

# Cached facts written by an out-of-band collector
FACTS_FILE = "/var/lib/rhsm-register/facts.json"

# Top level key holding the desired registration in the config
CFG_KEY = "rhsm_register"

SUBSCRIPTION_MANAGER = "subscription-manager"

# Present after a successful registration
CONSUMER_CERT = "/etc/pki/consumer/cert.pem"
CONSUMER_KEY = "/etc/pki/consumer/key.pem"
CONSUMER_CERT_FILES = (CONSUMER_CERT, CONSUMER_KEY)

# Fact names in the fact cache
FACT_CA_NAME = "rhsm_ca_name"
FACT_IDENTITY = "rhsm_identity"

# What u get if no config is provided
CFG_BUILTIN = {
    "def_log_file": "/var/log/rhsm-register.log",
    "log_cfgs": [],
    "log_basic": True,
    "facts_file": FACTS_FILE,
    CFG_KEY: {},
}
