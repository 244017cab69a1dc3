"""PowerShell script executed on the Veeam Backup & Replication server."""
import base64

REMOTE_SCRIPT = r'''
$ErrorActionPreference = "Stop"
$ProgressPreference = "SilentlyContinue"

# Veeam B&R 11 and older ship a snap-in, 12+ a module
if (Get-Module -ListAvailable -Name Veeam.Backup.PowerShell) {
  Import-Module Veeam.Backup.PowerShell -WarningAction SilentlyContinue
} elseif (-not (Get-PSSnapin -Name VeeamPSSnapin -ErrorAction SilentlyContinue)) {
  Add-PSSnapin VeeamPSSnapin
}

function ConvertTo-UnixSeconds($value) {
  if ($null -eq $value -or $value -eq [DateTime]::MinValue) { return $null }
  return [DateTimeOffset]::new($value.ToUniversalTime()).ToUnixTimeSeconds()
}

$rows = @()
foreach ($job in Get-VBRJob -WarningAction SilentlyContinue) {
  $running = [bool]$job.IsRunning
  $result = "None"
  $start = $null
  $end = $null
  if (-not $running) {
    $result = [string]$job.GetLastResult()
    $session = $job.FindLastSession()
    if ($session) {
      $start = ConvertTo-UnixSeconds $session.CreationTime
      $end = ConvertTo-UnixSeconds $session.EndTime
    }
  }
  $rows += [pscustomobject]@{
    name = [string]$job.Name
    is_backup = [bool]$job.IsBackup
    schedule_enabled = [bool]$job.IsScheduleEnabled
    is_running = $running
    last_result = $result
    session_start = $start
    session_end = $end
  }
}

# ConvertTo-Json unwraps single element arrays
if ($rows.Count -eq 0) { "[]" } else { ConvertTo-Json -InputObject @($rows) -Compress -Depth 3 }
'''


def powershell_command(script: str = REMOTE_SCRIPT) -> str:
    """Wrap *script* into a command line an OpenSSH server on Windows accepts."""
    encoded = base64.b64encode(script.encode("utf-16-le")).decode("ascii")
    return f"powershell.exe -NoProfile -NonInteractive -EncodedCommand {encoded}"
