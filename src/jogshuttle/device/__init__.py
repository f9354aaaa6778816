# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# ShuttlePRO event stages
# device level:
# stage 0: read raw input_event records from libevdev or a capture file
# stage 1: combine each run of raw events up to SYN_REPORT into one CombinedEvent

# decoder level:
# stage 2: turn CombinedEvents into actions, synthesizing jog ticks from elapsed time
# stage 3: print each action or hand it to an external command
