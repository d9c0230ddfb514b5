#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""CLI and library to manage linked AWS CLI profiles and MFA session tokens.

## Overview

`awsprof` is both a CLI and library to manage the profiles stored in the
standard AWS CLI credentials and config files. Profiles are named after a
`domain:role` convention, which links the three kinds of profiles a user
typically needs to work in an account protected by MFA:

`domain:iam`
: An IAM user profile holding the long-lived access key pair.

`domain:mfa`
: An MFA profile holding the ARN of the user's MFA device. After a session
refresh, it also holds a temporary session token obtained with an MFA code.

`domain:ROLE`
: An assume-role profile referencing a role ARN and a source profile, typically
`domain:mfa`, from which the role is assumed by the AWS CLI.

### CLI Usage

The awsprof CLI command is documented on the `awsprof.cli` page. A typical
first session looks like:

    $ awsprof add-iam work
    $ awsprof add-mfa work arn:aws:iam::111222333444:mfa/pete
    $ awsprof add-role dev arn:aws:iam::222333444111:role/Developer \\
        --source-profile work:mfa --region us-east-1
    $ eval "$(awsprof use work:dev)"
    $ awsprof refresh

### Library Usage

Of particular interest to library users are the following submodules:

`awsprof.naming`
: Compose, parse and classify `domain:role` profile names.

`awsprof.store`
: The `awsprof.store.ProfileStore` reads and writes single attributes of a
profile in the AWS credentials and config files.

`awsprof.linker`
: The `awsprof.linker.ProfileLinker` creates the three kinds of profiles and
enforces the links between them.

`awsprof.refresh`
: The `awsprof.refresh.SessionRefresher` refreshes the MFA session token of a
domain, skipping the MFA prompt while the current token is still valid.

`awsprof.identity`
: The `awsprof.identity.IdentityProvider` interface and its STS implementation
used to exchange an MFA code for temporary credentials.

`awsprof.active`
: The `awsprof.active.ActiveProfileSelector` reads and writes the active
profile (`AWS_PROFILE`) consumed by the AWS CLI.
"""

name = "awsprof"
__version__ = "1.0.0"
