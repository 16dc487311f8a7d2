# This file is part of rhsm-register. See LICENSE file for license information.
