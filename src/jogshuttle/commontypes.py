# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later


class JogShuttleError(Exception):
    pass


class NotInContextError(JogShuttleError):
    pass
